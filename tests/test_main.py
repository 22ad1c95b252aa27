"""Tests for the command-line entry point."""

from __future__ import annotations

import json

import pytest
import yaml

from src.main import main
from src.stamina_engine.rate import rate
from src.stamina_engine.sm_parser import load_sm
from src.stamina_engine.step_params import StepParams

from tests.helpers import SIMPLE_SM


def test_no_inputs(capsys):
    assert main([]) == 1
    assert "No simfiles?" in capsys.readouterr().out


def test_rates_simfile_and_writes_json(tmp_path, capsys):
    sm = tmp_path / "song.sm"
    sm.write_text(SIMPLE_SM, encoding="utf-8")
    out = tmp_path / "out" / "ratings.json"

    assert main([str(sm), "--json", str(out)]) == 0

    printed = capsys.readouterr().out
    assert "Test Song (Challenge)" in printed
    assert "8 notes" in printed

    (entry,) = json.loads(out.read_text(encoding="utf-8"))
    assert entry["title"] == "Test Song"
    assert entry["difficulty"] == "Challenge"
    assert entry["level"] == 12
    assert entry["rating"] > 0
    assert entry["trace"][0] == [0.0, 0.0]
    assert len(entry["trace"]) == 9
    times = [t for t, _ in entry["trace"]]
    assert times == sorted(times)


def test_fit_before_rating(tmp_path, capsys):
    sm = tmp_path / "song.sm"
    sm.write_text(SIMPLE_SM, encoding="utf-8")
    fitted = tmp_path / "fitted.yaml"

    code = main([str(sm), "--fit", "hill", "-i", "3", "--fit-output", str(fitted)])

    assert code == 0
    assert fitted.exists()
    printed = capsys.readouterr().out
    assert "Baseline error" in printed
    assert "Fitted on 1 charts" in printed


def test_search_settings_from_config_reach_the_ratings(tmp_path):
    sm = tmp_path / "song.sm"
    sm.write_text(SIMPLE_SM, encoding="utf-8")
    config = tmp_path / "engine.yaml"
    config.write_text(
        yaml.safe_dump({**StepParams().to_dict(), "search": {"rating_scale": 50.0}}),
        encoding="utf-8",
    )
    out = tmp_path / "ratings.json"

    assert main([str(sm), "-c", str(config), "--json", str(out)]) == 0

    (entry,) = json.loads(out.read_text(encoding="utf-8"))
    (chart,) = load_sm(sm)
    assert entry["rating"] == pytest.approx(rate(chart.notes, rating_scale=50.0))
    assert entry["rating"] == pytest.approx(2 * rate(chart.notes))
