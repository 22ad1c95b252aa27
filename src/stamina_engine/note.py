"""Note — the immutable input value of the rating engine, plus feet.

A note is a 2-D panel position and a timestamp in seconds since chart
start. Notes are produced by :mod:`sm_parser` (or the synthetic builders in
:mod:`chart`) and consumed read-only by everything else.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Note:
    x: float
    y: float
    time: float

    def distance(self, other: Note) -> float:
        """Euclidean distance between the panel positions of two notes."""
        return math.hypot(self.x - other.x, self.y - other.y)


class Foot(enum.Enum):
    LEFT = "L"
    RIGHT = "R"


FEET: tuple[Foot, Foot] = (Foot.LEFT, Foot.RIGHT)


def index_of(foot: Foot) -> int:
    """Map a foot to its slot in a two-element per-foot array.

    Raises:
        ValueError: If *foot* is not a :class:`Foot`.
    """
    if foot is Foot.LEFT:
        return 0
    if foot is Foot.RIGHT:
        return 1
    raise ValueError(f"Not a foot: {foot!r}")
