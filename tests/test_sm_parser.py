"""Tests for simfile parsing."""

from __future__ import annotations

import pytest

from src.stamina_engine.note import Note
from src.stamina_engine.sm_parser import BPMs, find_sm_files, load_sm, parse_sm

from tests.helpers import SIMPLE_SM


def _notes(text: str) -> list[list[Note]]:
    return [chart.notes for chart in parse_sm(text)]


def test_bpm_measure_to_time():
    b = BPMs([(0.0, 240.0)])
    assert b.measure_to_time(0.0) == 0.0
    assert b.measure_to_time(0.5) == 0.5
    assert b.measure_to_time(1.0) == 1.0
    assert b.measure_to_time(10.0) == 10.0

    b = BPMs([(0.0, 60.0)])
    assert b.measure_to_time(0.5) == 2.0
    assert b.measure_to_time(2.0) == 8.0

    b = BPMs([(0.0, 60.0), (4.0, 240.0), (8.0, 60.0)])
    assert b.measure_to_time(0.0) == 0.0
    assert b.measure_to_time(0.5) == 2.0
    assert b.measure_to_time(1.0) == 4.0
    assert b.measure_to_time(1.5) == 4.5
    assert b.measure_to_time(2.0) == 5.0
    assert b.measure_to_time(2.5) == 7.0


@pytest.mark.parametrize(
    "text",
    [
        "",
        "#BPMS:0.0=240.0",
        "#BPMS:0.0=240.0\n",
        "#BPMS:0.0240.0\n;",
        "#BPMS:0.0=fast;",
        "#BPMS:0.0=240.0\n;\n#NOTES:\n",
        "#BPMS:0.0=240.0\n;\n#NOTES:\n;\n",
        "#BPMS:0.0=240.0\n;\n#NOTES:\n0000\n0000\n0000\n0000\n",
        "#BPMS:0.0=240.0\n;\n#NOTES:\n0000\n0000\n:\n",
        "#BPMS:0.0=240.0;\n1000\n",
    ],
)
def test_malformed_simfiles(text):
    with pytest.raises(ValueError):
        parse_sm(text)


@pytest.mark.parametrize(
    "text",
    [
        "#BPMS:0.0=240.0;",
        "#BPMS:0.0=240.0\n;",
        "#BPMS:0.0=240.0,10.0=250.0\n;",
        "#BPMS:0.0=240.0\n,10.0=250.0;",
        "#BPMS:0.0=240.0,\n10.0=250.0;\n",
        "#BPMS:0.0=240.0\n;\n",
    ],
)
def test_bpms_without_charts(text):
    assert parse_sm(text) == []


def test_empty_chart():
    assert _notes("#BPMS:0.0=240.0\n;\n#NOTES:\n0000\n0000\n0000\n0000\n;\n") == [[]]


def test_single_note():
    text = "#BPMS:0.0=240.0\n;\n#NOTES:\n1000\n0000\n0000\n0000\n;\n"
    assert _notes(text) == [[Note(0.0, 1.0, 0.0)]]


def test_jump():
    text = "#BPMS:0.0=240.0\n;\n#NOTES:\n0011\n0000\n0000\n0000\n;\n"
    assert _notes(text) == [[Note(1.0, 2.0, 0.0), Note(2.0, 1.0, 0.0)]]


def test_row_time_within_measure():
    text = "#BPMS:0.0=240.0\n;\n#NOTES:\n0000\n0000\n0010\n0000\n;\n"
    assert _notes(text) == [[Note(1.0, 2.0, 0.5)]]


def test_second_measure():
    text = (
        "#BPMS:0.0=240.0\n;\n#NOTES:\n0000\n0000\n0100\n0000\n,\n"
        "0000\n0010\n0000\n0000\n;\n"
    )
    assert _notes(text) == [[Note(1.0, 0.0, 0.5), Note(1.0, 2.0, 1.25)]]


def test_multiple_charts():
    text = (
        "#BPMS:0.0=240.0\n;\n#NOTES:\n0000\n0000\n0000\n1000\n;\n\n"
        "#NOTES:\n1000\n;"
    )
    assert _notes(text) == [[Note(0.0, 1.0, 0.75)], [Note(0.0, 1.0, 0.0)]]


def test_step_characters():
    text = "#BPMS:0.0=240.0\n;\n#NOTES:\n1234\n0000\nLFM0\n0000\n;\n"
    assert _notes(text) == [
        [
            Note(0.0, 1.0, 0.0),
            Note(1.0, 0.0, 0.0),
            Note(2.0, 1.0, 0.0),
            Note(0.0, 1.0, 0.5),
        ]
    ]


@pytest.mark.parametrize(
    "bpms",
    ["#BPMS:0.0=240.0,2.0=60.0;", "#BPMS:0.0=240.0\n,2.0=60.0\n;"],
)
def test_bpm_changes(bpms):
    text = bpms + "\n#NOTES:\n1000\n1000\n1000\n1000\n;"
    times = [n.time for n in _notes(text)[0]]
    assert times == [0.0, 0.25, 0.5, 1.5]


def test_comments_are_ignored():
    text = "// header\n#BPMS:0.0=240.0; // tempo\n#NOTES:\n1000 // first\n// skip\n;\n"
    assert _notes(text) == [[Note(0.0, 1.0, 0.0)]]


def test_header_fields():
    (chart,) = parse_sm(SIMPLE_SM)
    assert chart.mode == "dance-single"
    assert chart.author == "Tester"
    assert chart.difficulty == "Challenge"
    assert chart.level == 12
    assert len(chart.notes) == 8
    times = [n.time for n in chart.notes]
    assert times == sorted(times)


def test_pump_and_doubles_layouts():
    text = "#BPMS:0.0=240.0;\n#NOTES:\n00001\n;\n#NOTES:\n00000001\n;"
    pump, doubles = _notes(text)
    assert pump == [Note(2.0, 0.0, 0.0)]
    assert doubles == [Note(5.0, 1.0, 0.0)]


def test_load_sm(tmp_path):
    path = tmp_path / "song.sm"
    path.write_text(SIMPLE_SM, encoding="utf-8")
    (chart,) = load_sm(path)
    assert chart.title == "Test Song"
    assert chart.difficulty == "Challenge"
    assert chart.rating == 12
    assert chart.description() == "Test Song (Challenge)"


def test_load_sm_falls_back_to_file_stem(tmp_path):
    path = tmp_path / "untitled.sm"
    path.write_text("#BPMS:0.0=120.0;\n#NOTES:\n1000\n;\n", encoding="utf-8")
    (chart,) = load_sm(path)
    assert chart.title == "untitled"
    assert chart.rating == 0


def test_load_sm_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_sm(tmp_path / "missing.sm")
    bad = tmp_path / "bad.sm"
    bad.write_text("#TITLE:x;", encoding="utf-8")
    with pytest.raises(ValueError, match="bad.sm"):
        load_sm(bad)


def test_find_sm_files(tmp_path):
    (tmp_path / "pack" / "song").mkdir(parents=True)
    a = tmp_path / "pack" / "song" / "a.SM"
    b = tmp_path / "b.sm"
    other = tmp_path / "pack" / "notes.txt"
    for p in (a, b, other):
        p.write_text("", encoding="utf-8")

    assert find_sm_files([tmp_path / "pack", b, b]) == sorted([a, b])
    assert find_sm_files([other]) == []
    with pytest.raises(FileNotFoundError):
        find_sm_files([tmp_path / "nope"])
