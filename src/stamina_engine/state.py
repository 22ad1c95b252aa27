"""Combined State — snapshot of both feet along one foot-assignment path.

``cur_fatigue`` is the sum of both feet's fatigue at the time of the most
recent note; ``max_fatigue`` is the largest ``cur_fatigue`` seen on the path
from the root. States are immutable: :meth:`CombinedState.step` returns a
new state.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvariantViolation
from .foot import FootFatigue
from .note import Foot, Note, index_of
from .step_params import StepParams


@dataclass(frozen=True)
class CombinedState:
    feet: tuple[FootFatigue, FootFatigue] = (FootFatigue(), FootFatigue())
    cur_fatigue: float = 0.0
    max_fatigue: float = 0.0

    def step(self, foot: Foot, note: Note, params: StepParams) -> CombinedState:
        """Assign *note* to *foot* and return the resulting state.

        Raises:
            InvariantViolation: If either foot's last hit is later than *note*.
        """
        for status in self.feet:
            if status.last_hit is not None and status.last_hit.time > note.time:
                raise InvariantViolation(
                    f"stepping an earlier note: {note.time} < {status.last_hit.time}"
                )

        feet = list(self.feet)
        slot = index_of(foot)
        feet[slot] = feet[slot].step(note, params)

        cur_fatigue = sum(f.fatigue(note.time, params) for f in feet)
        return CombinedState(
            feet=(feet[0], feet[1]),
            cur_fatigue=cur_fatigue,
            max_fatigue=max(self.max_fatigue, cur_fatigue),
        )

    def foot(self, foot: Foot) -> FootFatigue:
        return self.feet[index_of(foot)]
