"""Note layouts and simfile snippets shared by the tests."""

from __future__ import annotations

import math


def fract(value: float) -> float:
    return value - math.floor(value)


def scattered_pos(i: float) -> tuple[float, float]:
    """Deterministic, irregular panel positions."""
    return (fract(i / 4.0), fract(i / 5.0))


def origin_pos(_: float) -> tuple[float, float]:
    return (0.0, 0.0)


SIMPLE_SM = """\
#TITLE:Test Song;
#BPMS:0.000=240.000;
#NOTES:
     dance-single:
     Tester:
     Challenge:
     12:
     0.1,0.2,0.3,0.4,0.5:
1000
0100
0010
0001
,
1001
0000
0110
0000
;
"""
