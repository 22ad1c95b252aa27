"""Relative difficulty of related charts."""

from __future__ import annotations

from src.stamina_engine.chart import Chart, create_notes
from src.stamina_engine.rate import rate

from tests.helpers import scattered_pos


def _stream(count: int, bpm: float):
    return create_notes(count, scattered_pos, lambda f: 15.0 / bpm * f)


def test_breaks_make_streams_easier(params):
    arrowless = Chart.with_break(180.0, 4, 8)
    filled = Chart.with_break(180.0, 4, 8, break_subdivision=8)
    unbroken = Chart.from_unbroken(180.0, 16)

    r_arrowless = rate(arrowless.notes, params)
    r_filled = rate(filled.notes, params)
    r_unbroken = rate(unbroken.notes, params)

    assert r_arrowless < r_filled
    assert r_filled < r_unbroken


def test_one_more_note_is_harder(params):
    assert rate(_stream(16, 200.0), params) < rate(_stream(17, 200.0), params)


def test_slightly_faster_is_harder(params):
    assert rate(_stream(16, 200.0), params) < rate(_stream(16, 201.0), params)


def test_longer_streams_are_harder(params):
    short = Chart.from_unbroken(200.0, 2)
    long = Chart.from_unbroken(200.0, 4)
    assert rate(short.notes, params) < rate(long.notes, params)
