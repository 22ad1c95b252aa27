"""Foot Fatigue — decay-plus-impulse fatigue model for a single foot.

Each foot remembers the last note it hit and its fatigue right after that
hit. Between hits fatigue decays exponentially toward zero; every hit adds
a step cost that grows with travel distance and shrinks with rest time.

Formulas:
    rest          f * exp(-rest * decay_rate)
    rest + step   rest(f) + per_step_ratio * (base + distance * dist_ratio)
                            / (rest_time_add_constant + rest)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import InvariantViolation
from .note import Note
from .step_params import StepParams


def fatigue_after_rest(prev_fatigue: float, rest_time: float, params: StepParams) -> float:
    """Decay *prev_fatigue* over *rest_time* seconds.

    Raises:
        InvariantViolation: If *rest_time* is negative or the decay factor
            falls outside ``[0, 1]``.
    """
    if rest_time < 0:
        raise InvariantViolation(f"negative rest time {rest_time}: stepping an earlier note")
    ratio = math.exp(-rest_time * params.fatigue_decay_rate)
    if ratio < 0.0 or ratio > 1.0:
        raise InvariantViolation(f"unexpected decay ratio {ratio} for rest time {rest_time}")
    return prev_fatigue * ratio


def fatigue_after_rest_and_step(
    last_fatigue: float,
    rest_time: float,
    distance: float,
    params: StepParams,
) -> float:
    """Decay over *rest_time*, then add the cost of stepping *distance*."""
    rested = fatigue_after_rest(last_fatigue, rest_time, params)
    step_cost = (
        params.fatigue_per_step_ratio
        * (params.base_fatigue_per_step + distance * params.fatigue_dist_ratio)
        / (params.rest_time_add_constant + rest_time)
    )
    return rested + step_cost


@dataclass(frozen=True)
class FootFatigue:
    """Fatigue of one foot. ``last_hit is None`` means it has not stepped yet."""

    last_hit: Note | None = None
    last_fatigue: float = 0.0

    def step(self, note: Note, params: StepParams) -> FootFatigue:
        """Return this foot after hitting *note*."""
        if self.last_hit is None:
            rest_time = 0.0
            distance = 0.0
        else:
            rest_time = note.time - self.last_hit.time
            distance = note.distance(self.last_hit)

        return FootFatigue(
            last_hit=note,
            last_fatigue=fatigue_after_rest_and_step(
                self.last_fatigue, rest_time, distance, params
            ),
        )

    def fatigue(self, query_time: float, params: StepParams) -> float:
        """Project fatigue forward to *query_time* without stepping."""
        if self.last_hit is None:
            return 0.0
        return fatigue_after_rest(self.last_fatigue, query_time - self.last_hit.time, params)
