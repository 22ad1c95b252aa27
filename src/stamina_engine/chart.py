"""Chart — labelled note sequences and synthetic stream builders.

Synthetic charts place notes on a 16th-note grid. A note's panel depends
only on its global grid slot, so a chart with a break and the unbroken
chart of the same length share positions wherever both have a note.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .note import Note
from .panel_layout import col_to_pos


# ITG columns cycled by synthetic streams: left, down, right, up.
_STREAM_COLUMNS: tuple[int, ...] = (0, 1, 3, 2)
_SLOTS_PER_MEASURE: int = 16

# (bpm, measures, rating) of the historical calibration streams.
_PRESETS: list[tuple[float, int, int]] = [
    (170., 96, 15), (170., 128, 15), (170., 192, 16), (170., 256, 16),
    (170., 384, 17), (170., 512, 17),
    (180., 64, 15), (180., 96, 15), (180., 128, 16), (180., 192, 16),
    (180., 256, 17), (180., 384, 17), (180., 512, 18),
    (190., 48, 15), (190., 64, 15), (190., 96, 16), (190., 128, 17),
    (190., 192, 17), (190., 256, 18), (190., 384, 18), (190., 512, 19),
    (200., 32, 15), (200., 48, 15), (200., 64, 16), (200., 96, 17),
    (200., 128, 17), (200., 192, 18), (200., 256, 19), (200., 384, 19),
    (200., 512, 20),
    (210., 32, 15), (210., 48, 16), (210., 64, 17), (210., 96, 18),
    (210., 128, 18), (210., 192, 19), (210., 256, 20), (210., 384, 20),
    (210., 512, 21),
    (220., 32, 16), (220., 48, 17), (220., 64, 18), (220., 96, 19),
    (220., 128, 19), (220., 192, 20), (220., 256, 21), (220., 384, 22),
    (220., 512, 22),
    (230., 32, 17), (230., 48, 18), (230., 64, 19), (230., 96, 20),
    (230., 128, 20), (230., 192, 21), (230., 256, 22), (230., 384, 22),
    (230., 512, 23),
]
_LONGEST_PRESET: int = 512


def create_notes(
    count: int,
    pos_fn: Callable[[float], tuple[float, float]],
    time_fn: Callable[[float], float],
) -> list[Note]:
    """Build *count* notes; note ``i`` sits at ``pos_fn(i)`` at ``time_fn(i)``."""
    notes: list[Note] = []
    for i in range(count):
        x, y = pos_fn(float(i))
        notes.append(Note(x=x, y=y, time=time_fn(float(i))))
    return notes


def _slot_note(slot: int, bpm: float) -> Note:
    x, y = col_to_pos(_STREAM_COLUMNS[slot % len(_STREAM_COLUMNS)], 4)
    return Note(x=x, y=y, time=15.0 / bpm * slot)


@dataclass
class Chart:
    title: str
    difficulty: str = ""
    notes: list[Note] = field(default_factory=list)
    rating: int = 0

    def description(self) -> str:
        if not self.difficulty:
            return self.title
        return f"{self.title} ({self.difficulty})"

    @classmethod
    def from_unbroken(cls, bpm: float, measures: int, rating: int = 0) -> Chart:
        """An unbroken 16th-note stream of *measures* measures at *bpm*."""
        notes = [_slot_note(slot, bpm) for slot in range(measures * _SLOTS_PER_MEASURE)]
        return cls(title=f"{measures}@{bpm:g}", notes=notes, rating=rating)

    @classmethod
    def with_break(
        cls,
        bpm: float,
        stream_measures: int,
        break_measures: int,
        rating: int = 0,
        break_subdivision: int = 0,
    ) -> Chart:
        """Stream, break, stream again.

        Args:
            bpm: Tempo of the whole chart.
            stream_measures: Measures of 16th notes before and after the break.
            break_measures: Length of the break in measures.
            rating: Difficulty label.
            break_subdivision: ``0`` leaves the break without arrows; otherwise
                the break is filled with notes of that subdivision (8 = 8ths).
                Must divide 16.

        Raises:
            ValueError: If *break_subdivision* does not divide 16.
        """
        if break_subdivision < 0 or (
            break_subdivision and _SLOTS_PER_MEASURE % break_subdivision != 0
        ):
            raise ValueError(f"Break subdivision must divide 16, got {break_subdivision}")

        stream = stream_measures * _SLOTS_PER_MEASURE
        gap = break_measures * _SLOTS_PER_MEASURE
        slots = list(range(stream))
        if break_subdivision:
            step = _SLOTS_PER_MEASURE // break_subdivision
            slots.extend(range(stream, stream + gap, step))
        slots.extend(range(stream + gap, 2 * stream + gap))

        kind = f"{break_subdivision}ths" if break_subdivision else "arrowless"
        return cls(
            title=f"{stream_measures}+{break_measures} {kind}+{stream_measures}@{bpm:g}",
            notes=[_slot_note(slot, bpm) for slot in slots],
            rating=rating,
        )

    @classmethod
    def presets(cls, only_longest: bool = False) -> list[Chart]:
        """The historical calibration set of labelled unbroken streams."""
        return [
            cls.from_unbroken(bpm, measures, rating)
            for bpm, measures, rating in _PRESETS
            if not only_longest or measures == _LONGEST_PRESET
        ]
