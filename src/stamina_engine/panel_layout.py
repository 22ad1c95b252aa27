"""Panel Layout — map chart columns to 2-D panel positions.

Supported pads (checked in this order against the column count):
    ITG / DDR   4 panels   left, down, up, right around an empty centre
    Pump        5 panels   four corners plus the centre
    9-panel     9 panels   full 3×3 grid

Doubles and wider charts place further pads 3 units to the right.
"""

from __future__ import annotations

# (x, y) per panel, in column order.
_ITG_PANELS: list[tuple[float, float]] = [(0.0, 1.0), (1.0, 0.0), (1.0, 2.0), (2.0, 1.0)]
_PUMP_PANELS: list[tuple[float, float]] = [
    (0.0, 0.0), (0.0, 2.0), (1.0, 1.0), (2.0, 2.0), (2.0, 0.0),
]
_NINE_PANELS: list[tuple[float, float]] = [
    (0.0, 0.0), (0.0, 1.0), (0.0, 2.0),
    (1.0, 0.0), (1.0, 1.0), (1.0, 2.0),
    (2.0, 2.0), (2.0, 1.0), (2.0, 0.0),
]

_PAD_TYPES: list[list[tuple[float, float]]] = [_ITG_PANELS, _PUMP_PANELS, _NINE_PANELS]

# Horizontal distance between neighbouring pads.
PAD_SPACING: float = 3.0


def col_to_pos(col: int, num_cols: int) -> tuple[float, float]:
    """Return the ``(x, y)`` panel position of column *col*.

    Raises:
        ValueError: If *num_cols* matches no pad type or *col* is out of range.
    """
    if not 0 <= col < num_cols:
        raise ValueError(f"Column {col} out of range for {num_cols} columns")
    for panels in _PAD_TYPES:
        if num_cols % len(panels) == 0:
            pad, panel = divmod(col, len(panels))
            x, y = panels[panel]
            return (PAD_SPACING * pad + x, y)
    raise ValueError(f"Unexpected number of columns: {num_cols}")
