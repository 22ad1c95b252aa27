"""Rate — orchestrate the windowed beam search and export its results.

Responsibilities:
    1. Validate the note ordering contract.
    2. Grow the :class:`SearchGraph` window by window, keeping the
       ``beam_width`` most promising branches after every round.
    3. Expand the last ``window - 1`` notes exhaustively and pick the most
       fatigued terminal node.
    4. Convert its ``max_fatigue`` into a rating, or walk its path to get the
       fatigue at every note.

Every public function is a pure function of ``(notes, params)``; each call
builds and discards its own graph.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from .errors import InvariantViolation
from .note import Foot, Note
from .search_graph import SearchGraph
from .step_params import StepParams

logger = logging.getLogger(__name__)


# ── Search constants ──────────────────────────────────────────
# How many notes to simulate per round.
WINDOW: int = 4
# Number of nodes kept after each round for the next one.
BEAM_WIDTH: int = 4
# Calibration divisor from raw max fatigue to a presented rating.
RATING_SCALE: float = 100.0


@dataclass(frozen=True)
class RatingResult:
    """Outcome of one search: rating plus the best path, note by note."""

    rating: float
    max_fatigue: float
    trajectory: list[float] = field(default_factory=list)
    feet: list[Foot] = field(default_factory=list)

    def trace(self, notes: Sequence[Note]) -> list[tuple[float, float]]:
        """``(time, fatigue)`` per note of the rated *notes*, after ``(0, 0)``."""
        return [(0.0, 0.0)] + [(n.time, f) for n, f in zip(notes, self.trajectory)]

    def annotations(self, notes: Sequence[Note]) -> list[dict[str, Any]]:
        """JSON-friendly per-note rows; see :func:`annotate`."""
        return [
            {
                "time": note.time,
                "x": note.x,
                "y": note.y,
                "foot": foot.value,
                "fatigue": fatigue,
            }
            for note, foot, fatigue in zip(notes, self.feet, self.trajectory)
        ]


def _check_ordering(notes: Sequence[Note]) -> None:
    for prev, cur in zip(notes, notes[1:]):
        if cur.time < prev.time:
            raise InvariantViolation(
                f"notes are not in time order: {cur.time} follows {prev.time}"
            )


def search(
    notes: Sequence[Note],
    params: StepParams,
    window: int = WINDOW,
    beam_width: int = BEAM_WIDTH,
) -> tuple[SearchGraph, int] | None:
    """Run the beam search and return the graph and its best terminal node.

    Each round frees everything below the selected nodes and every branch
    that no longer leads to one. What stays live is the frontier plus the
    root-to-frontier ancestor chains, which :func:`evaluate` walks to
    rebuild the path: at most ``1 + beam_width * depth`` nodes between
    rounds, so the retained history grows linearly with the chart while a
    round's working set stays ``beam_width * 2**window``.

    Returns:
        ``None`` for an empty note sequence, otherwise ``(graph, handle)``.

    Raises:
        ValueError: If *window* or *beam_width* is smaller than 1.
        InvariantViolation: If *notes* are not in non-decreasing time order.
    """
    if window < 1 or beam_width < 1:
        raise ValueError(f"window and beam_width must be >= 1, got {window}, {beam_width}")
    if not notes:
        return None
    _check_ordering(notes)

    graph = SearchGraph(params)
    frontier = [graph.root]
    rounds = max(0, len(notes) - window + 1)
    for start in range(rounds):
        leaves = graph.expand(frontier, notes[start:start + window])
        selected = graph.best_ancestors(leaves, window - 1, beam_width)
        graph.remove_descendants(selected)
        graph.discard_unselected(frontier, selected)
        frontier = selected

    tail = notes[len(notes) - min(len(notes), window - 1):]
    terminals = graph.expand(frontier, tail)
    best = max(terminals, key=lambda h: graph[h].max_fatigue)

    logger.debug(
        "searched %d notes in %d rounds; %d live nodes, max fatigue %.3f",
        len(notes), rounds, graph.node_count(), graph[best].max_fatigue,
    )
    return graph, best


def evaluate(
    notes: Sequence[Note],
    params: StepParams | None = None,
    window: int = WINDOW,
    beam_width: int = BEAM_WIDTH,
    rating_scale: float = RATING_SCALE,
) -> RatingResult:
    """Rate *notes* and reconstruct the best path in one search."""
    params = params or StepParams()
    found = search(notes, params, window, beam_width)
    if found is None:
        return RatingResult(rating=0.0, max_fatigue=0.0)

    graph, best = found
    path = graph.path(best)[1:]  # drop the root
    max_fatigue = graph[best].max_fatigue
    return RatingResult(
        rating=max_fatigue / rating_scale,
        max_fatigue=max_fatigue,
        trajectory=[graph[h].cur_fatigue for h in path],
        feet=[graph.foot(h) for h in path],
    )


def rate(
    notes: Sequence[Note],
    params: StepParams | None = None,
    window: int = WINDOW,
    beam_width: int = BEAM_WIDTH,
    rating_scale: float = RATING_SCALE,
) -> float:
    """Rate a sequence of notes. The notes must be in time order.

    Returns:
        ``max_fatigue / rating_scale`` of the most fatigued path found, or
        ``0.0`` when there are no notes.
    """
    found = search(notes, params or StepParams(), window, beam_width)
    if found is None:
        return 0.0
    graph, best = found
    return graph[best].max_fatigue / rating_scale


def trajectory(
    notes: Sequence[Note],
    params: StepParams | None = None,
    include_origin: bool = False,
    window: int = WINDOW,
    beam_width: int = BEAM_WIDTH,
) -> list[float]:
    """Fatigue at each note along the most fatigued path, in chart order.

    Args:
        include_origin: Prefix the result with a synthetic ``0.0``.
    """
    result = evaluate(notes, params, window, beam_width)
    if include_origin:
        return [0.0] + result.trajectory
    return result.trajectory


def fatigue_trace(
    notes: Sequence[Note],
    params: StepParams | None = None,
    window: int = WINDOW,
    beam_width: int = BEAM_WIDTH,
) -> list[tuple[float, float]]:
    """``(time, fatigue)`` points for plotting, starting at ``(0, 0)``."""
    return evaluate(notes, params, window, beam_width).trace(notes)


def annotate(
    notes: Sequence[Note],
    params: StepParams | None = None,
    window: int = WINDOW,
    beam_width: int = BEAM_WIDTH,
) -> list[dict[str, Any]]:
    """Per-note foot assignment and fatigue along the most fatigued path.

    Returns:
        A list of dicts (same length as *notes*), each containing:
            - ``time``    (float)
            - ``x``, ``y`` (float)
            - ``foot``    (``"L"`` | ``"R"``)
            - ``fatigue`` (float)
    """
    return evaluate(notes, params, window, beam_width).annotations(notes)


def annotations_to_json_bytes(annotations: list[dict[str, Any]]) -> bytes:
    """Serialise annotations to UTF-8 JSON bytes (for download buttons)."""
    return json.dumps(annotations, indent=2, ensure_ascii=False).encode("utf-8")
