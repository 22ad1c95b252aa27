"""SM Parser — load and extract structured note data from ``.sm`` simfiles.

Responsibilities:
    - Read the ``#BPMS`` change list and convert measure positions to seconds.
    - Extract every chart in ``#NOTES`` sections with its header fields
      (mode, author, difficulty, level).
    - Map note columns to panel positions via :mod:`panel_layout`.
    - Return notes in row order (non-decreasing time).

No rating logic lives here. Stops and ``#OFFSET`` are ignored: the rating
only depends on relative note times.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .chart import Chart
from .note import Note
from .panel_layout import col_to_pos

logger = logging.getLogger(__name__)


# Characters that may appear in a note row, and those that start a step
# (tap, hold head, roll head, lift).
_ROW_CHARS: frozenset[str] = frozenset("01234MLF")
_STEP_CHARS: frozenset[str] = frozenset("124L")

_TITLE_RE = re.compile(r"#TITLE:([^;]*);")


@dataclass
class SMChart:
    mode: str = ""
    author: str = ""
    difficulty: str = ""
    level: int = 0
    notes: list[Note] = field(default_factory=list)

    def to_chart(self, title: str) -> Chart:
        return Chart(title=title, difficulty=self.difficulty, notes=self.notes, rating=self.level)


class _Lines:
    """Cursor over the meaningful lines of a simfile (comments stripped)."""

    def __init__(self, text: str) -> None:
        self._lines = [line.split("//", 1)[0].strip() for line in text.splitlines()]
        self._idx = 0

    def _skip_blank(self) -> None:
        while self._idx < len(self._lines) and not self._lines[self._idx]:
            self._idx += 1

    def peek(self) -> str | None:
        self._skip_blank()
        if self._idx < len(self._lines):
            return self._lines[self._idx]
        return None

    def consume(self) -> str | None:
        line = self.peek()
        if line is not None:
            self._idx += 1
        return line

    def peek_required(self) -> str:
        line = self.peek()
        if line is None:
            raise ValueError("Unexpected end of simfile")
        return line

    def consume_required(self) -> str:
        line = self.consume()
        if line is None:
            raise ValueError("Unexpected end of simfile")
        return line


class BPMs:
    """Piecewise-constant tempo map of ``(beat, bpm)`` changes."""

    def __init__(self, changes: list[tuple[float, float]]) -> None:
        if not changes:
            raise ValueError("#BPMS must contain at least one change")
        self.changes = sorted(changes)

    def beat_to_time(self, beat: float) -> float:
        last_beat, last_bpm = 0.0, self.changes[0][1]
        seconds = 0.0
        for change_beat, bpm in self.changes:
            if beat <= change_beat:
                break
            seconds += 60.0 / last_bpm * (change_beat - last_beat)
            last_beat, last_bpm = change_beat, bpm
        return seconds + 60.0 / last_bpm * (beat - last_beat)

    def measure_to_time(self, measure: float) -> float:
        return self.beat_to_time(measure * 4.0)


def _is_note_row(line: str) -> bool:
    return bool(line) and all(c in _ROW_CHARS for c in line)


def _parse_bpms(lines: _Lines) -> BPMs:
    while True:
        line = lines.consume_required()
        if line.startswith("#BPMS:"):
            break

    body = line[len("#BPMS:"):]
    while not body.endswith(";"):
        body += lines.consume_required()
    body = body[:-1]

    changes: list[tuple[float, float]] = []
    for entry in body.split(","):
        if "=" not in entry:
            raise ValueError(f"Didn't find '=' in BPM change: {entry!r}")
        beat, bpm = entry.split("=", 1)
        try:
            changes.append((float(beat), float(bpm)))
        except ValueError as exc:
            raise ValueError(f"Failed to parse BPM change {entry!r}: {exc}") from exc
    return BPMs(changes)


def _parse_measure(lines: _Lines, measure_idx: int, bpms: BPMs) -> list[Note]:
    rows: list[str] = []
    while _is_note_row(lines.peek_required()):
        rows.append(lines.consume_required())

    notes: list[Note] = []
    for row_idx, row in enumerate(rows):
        time = bpms.measure_to_time(measure_idx + row_idx / len(rows))
        for col, c in enumerate(row):
            if c in _STEP_CHARS:
                x, y = col_to_pos(col, len(row))
                notes.append(Note(x=x, y=y, time=time))
    return notes


def _parse_header(lines: _Lines) -> SMChart:
    values: list[str] = []
    while lines.peek_required().endswith(":"):
        values.append(lines.consume_required()[:-1].strip())

    chart = SMChart()
    if len(values) > 0:
        chart.mode = values[0]
    if len(values) > 1:
        chart.author = values[1]
    if len(values) > 2:
        chart.difficulty = values[2]
    if len(values) > 3:
        try:
            chart.level = int(values[3])
        except ValueError:
            logger.warning("Ignoring non-integer chart level %r", values[3])
    return chart


def _parse_chart(lines: _Lines, bpms: BPMs) -> SMChart:
    chart = _parse_header(lines)
    first = lines.peek_required()
    if not _is_note_row(first):
        raise ValueError(f"Expected note rows, got {first!r}")

    measure_idx = 0
    while True:
        chart.notes.extend(_parse_measure(lines, measure_idx, bpms))
        separator = lines.consume_required()
        if separator == ";":
            return chart
        if separator != ",":
            raise ValueError(f"Expected ',' separator, got {separator!r}")
        measure_idx += 1


def parse_sm(text: str) -> list[SMChart]:
    """Parse every chart of a simfile.

    Raises:
        ValueError: On a missing or malformed ``#BPMS`` tag, note rows
            outside a ``#NOTES`` section, or a malformed chart body.
    """
    lines = _Lines(text)
    bpms = _parse_bpms(lines)

    charts: list[SMChart] = []
    while (line := lines.consume()) is not None:
        if line == "#NOTES:":
            charts.append(_parse_chart(lines, bpms))
        elif _is_note_row(line):
            raise ValueError("Unexpected notes while not in #NOTES section")
    return charts


def load_sm(sm_path: str | Path) -> list[Chart]:
    """Load a simfile and return its charts labelled with their levels.

    Raises:
        FileNotFoundError: If *sm_path* does not exist.
        ValueError: If the file cannot be parsed.
    """
    path = Path(sm_path)
    if not path.exists():
        raise FileNotFoundError(f"Simfile not found: {path}")

    text = path.read_text(encoding="utf-8", errors="replace")
    try:
        sm_charts = parse_sm(text)
    except ValueError as exc:
        raise ValueError(f"Failed to parse simfile '{path.name}': {exc}") from exc

    match = _TITLE_RE.search(text)
    title = match.group(1).strip() if match and match.group(1).strip() else path.stem
    logger.info("Read %d chart(s) from %s", len(sm_charts), path)
    return [c.to_chart(title) for c in sm_charts]


def find_sm_files(paths: Iterable[str | Path]) -> list[Path]:
    """Collect ``.sm`` files from files and (recursively) directories.

    Raises:
        FileNotFoundError: If a given path does not exist.
    """
    found: set[Path] = set()
    for p in paths:
        path = Path(p)
        if path.is_file():
            if path.suffix.lower() == ".sm":
                found.add(path)
        elif path.is_dir():
            found.update(f for f in path.rglob("*") if f.is_file() and f.suffix.lower() == ".sm")
        else:
            raise FileNotFoundError(f"Input path not found: {path}")
    return sorted(found)
