"""Shared fixtures for the Stamina Rater test suite."""

from __future__ import annotations

import pytest

from src.stamina_engine.step_params import StepParams


@pytest.fixture
def params() -> StepParams:
    return StepParams()
