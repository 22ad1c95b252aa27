"""Evaluator — score a step-constant set against labelled charts.

A chart of level ``L`` is matched when its rating lands in ``[L, L + 1)``;
the error of a chart is therefore measured from the centre ``L + 0.5``.
Ratings are computed with the configured search settings (window, beam
width, rating scale), so fitted constants match what the CLI reports.

Provides:
    - ``chart_error``         : signed error of one chart
    - ``mean_squared_error``  : mean of squared chart errors
    - ``evaluate_params``     : MSE, root of summed squares, level accuracy
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from src.config import SearchSettings
from src.stamina_engine.chart import Chart
from src.stamina_engine.rate import rate
from src.stamina_engine.step_params import StepParams


def chart_error(
    chart: Chart,
    params: StepParams,
    search: SearchSettings | None = None,
) -> float:
    """Signed distance between the chart's rating and the centre of its level."""
    search = search or SearchSettings()
    rating = rate(
        chart.notes, params, search.window, search.beam_width, search.rating_scale
    )
    return rating - (chart.rating + 0.5)


def _errors(
    charts: Sequence[Chart],
    params: StepParams,
    search: SearchSettings | None,
) -> np.ndarray:
    return np.array([chart_error(c, params, search) for c in charts], dtype=float)


def mean_squared_error(
    charts: Sequence[Chart],
    params: StepParams,
    search: SearchSettings | None = None,
) -> float:
    """Mean squared error over *charts*. Returns 0.0 on empty input."""
    if not charts:
        return 0.0
    return float(np.mean(_errors(charts, params, search) ** 2))


def evaluate_params(
    charts: Sequence[Chart],
    params: StepParams,
    search: SearchSettings | None = None,
) -> dict[str, float]:
    """Rate every chart once and summarise the errors.

    Returns:
        A dict with keys:
            - ``mse``       (float)
            - ``rsse``      (float): square root of the summed squared errors
            - ``accuracy``  (float): fraction of charts whose rating floors
              to their level
    """
    if not charts:
        return {"mse": 0.0, "rsse": 0.0, "accuracy": 0.0}

    errors = _errors(charts, params, search)
    squared = errors ** 2
    # rating in [L, L + 1) <=> error in [-0.5, 0.5)
    hits = np.logical_and(errors >= -0.5, errors < 0.5)
    return {
        "mse": float(np.mean(squared)),
        "rsse": float(math.sqrt(np.sum(squared))),
        "accuracy": float(np.mean(hits)),
    }
