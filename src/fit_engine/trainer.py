"""Trainer — fit the five step constants to labelled charts.

Two optimisers treat :func:`rate` as a black-box scalar function of the
constants and minimise the mean squared level error
(:func:`evaluator.mean_squared_error`):

Coordinate descent:
    1. Start from the baseline constants.
    2. For each constant, sweep over candidate multipliers.
    3. Keep the value that minimises the error.
    4. Repeat for ``max_rounds`` (default 3) until no constant improves.

Hill climbing:
    1. Perturb every constant: scale by U(0, 2) or shift by U(-1, 1),
       chosen by a fair coin per constant.
    2. Clamp non-positive constants to a small epsilon.
    3. Keep the candidate if it lowers the error.

Design:
    - Deterministic for a given seed, single-threaded, CPU-only.
    - Plain numpy for the random draws.
    - Optionally writes the fitted constants to a YAML file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import numpy as np
import yaml

from src.config import SearchSettings
from src.stamina_engine.chart import Chart
from src.stamina_engine.step_params import PARAM_KEYS, StepParams

from .evaluator import mean_squared_error


# ── Candidate multipliers for coordinate descent ─────────────
_MULTIPLIERS: list[float] = [0.25, 0.5, 0.75, 0.9, 1.1, 1.25, 1.5, 2.0, 3.0]


def save_params(
    params: StepParams,
    output_path: str | Path,
    baseline_error: float | None = None,
    learned_error: float | None = None,
) -> Path:
    """Write fitted constants to a YAML file with a short provenance header.

    Returns:
        The path written.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as fh:
        fh.write(
            "# ────────────────────────────────────────────────────────────────\n"
            "# Stamina Rater — Fitted Step Fatigue Configuration\n"
            "# ────────────────────────────────────────────────────────────────\n"
            "# Generated by src/fit_engine/trainer.py.\n"
        )
        if baseline_error is not None:
            fh.write(f"# Baseline error : {baseline_error:.4f}\n")
        if learned_error is not None:
            fh.write(f"# Learned error  : {learned_error:.4f}\n")
        fh.write("\n")
        yaml.dump(params.to_dict(), fh, default_flow_style=False, sort_keys=False)
    return output_path


def _require_charts(charts: Sequence[Chart]) -> None:
    if not charts:
        raise ValueError(
            "No training charts provided. "
            "Pass labelled .sm files or use the preset streams."
        )


def _result(
    params: StepParams,
    baseline_error: float,
    learned_error: float,
    output_path: str | Path | None,
    verbose: bool,
) -> dict[str, Any]:
    written: Path | None = None
    if output_path is not None:
        written = save_params(params, output_path, baseline_error, learned_error)

    if verbose:
        if written is not None:
            print(f"\nFitted constants saved to: {written}")
        print(f"  Baseline error: {baseline_error:.4f}")
        print(f"  Learned error:  {learned_error:.4f}")
        print(f"  Improvement:    {baseline_error - learned_error:+.4f}")

    return {
        "params": params,
        "baseline_error": baseline_error,
        "learned_error": learned_error,
        "output_path": written,
    }


def coordinate_descent(
    charts: Sequence[Chart],
    base_params: StepParams | None = None,
    max_rounds: int = 3,
    output_path: str | Path | None = None,
    verbose: bool = True,
    search: SearchSettings | None = None,
) -> dict[str, Any]:
    """Optimise the step constants one at a time.

    Args:
        charts: Labelled charts from :func:`dataset.load_training_set`.
        base_params: Starting constants. Defaults to :class:`StepParams`.
        max_rounds: Number of full sweeps over all constants.
        output_path: If given, write the fitted constants there as YAML.
        verbose: If True, print progress to stdout.
        search: Window, beam width and rating scale used to rate charts.
            Defaults to the built-in search constants.

    Returns:
        A dict with:
            - ``params``          (StepParams): fitted constants
            - ``baseline_error``  (float): error with the base constants
            - ``learned_error``   (float): error after fitting
            - ``output_path``     (Path | None): where the YAML was saved

    Raises:
        ValueError: If ``charts`` is empty.
    """
    _require_charts(charts)

    best_params = base_params or StepParams()
    baseline_error = mean_squared_error(charts, best_params, search)
    best_error = baseline_error
    if verbose:
        print(f"Baseline error: {baseline_error:.4f}")

    for rnd in range(max_rounds):
        improved = False

        for key in PARAM_KEYS:
            current = getattr(best_params, key)
            best_value = current

            if verbose:
                print(
                    f"  Round {rnd + 1}/{max_rounds} | "
                    f"Tuning {key} (current={current:.4f})"
                )

            for factor in _MULTIPLIERS:
                candidate_value = current * factor
                if candidate_value <= 0:
                    continue

                err = mean_squared_error(
                    charts, best_params.with_value(key, candidate_value), search
                )
                if err < best_error:
                    best_error = err
                    best_value = candidate_value

            if best_value != current:
                best_params = best_params.with_value(key, best_value)
                improved = True
                if verbose:
                    print(
                        f"    → {key}: {current:.4f} → "
                        f"{best_value:.4f} (err={best_error:.4f})"
                    )

        if verbose:
            print(f"  Round {rnd + 1} done — error: {best_error:.4f}")

        if not improved:
            if verbose:
                print("  No improvement — stopping early.")
            break

    return _result(best_params, baseline_error, best_error, output_path, verbose)


def perturb(params: StepParams, rng: np.random.Generator) -> StepParams:
    """Randomly scale or shift every constant, then clamp to positive."""
    values = np.array(params.to_vector(), dtype=float)
    scale = rng.random(values.size) < 0.5
    values = np.where(
        scale,
        values * rng.uniform(0.0, 2.0, values.size),
        values + rng.uniform(-1.0, 1.0, values.size),
    )
    return StepParams.from_vector(values.tolist()).clamped()


def hill_climb(
    charts: Sequence[Chart],
    base_params: StepParams | None = None,
    iterations: int = 1000,
    seed: int | None = 0,
    output_path: str | Path | None = None,
    verbose: bool = True,
    search: SearchSettings | None = None,
) -> dict[str, Any]:
    """Hill-climb the step constants by random perturbation.

    Args:
        charts: Labelled charts from :func:`dataset.load_training_set`.
        base_params: Starting constants. Defaults to :class:`StepParams`.
        iterations: Number of candidate perturbations to try.
        seed: Seed for the numpy random generator.
        output_path: If given, write the fitted constants there as YAML.
        verbose: If True, print every improvement.
        search: Same as for :func:`coordinate_descent`.

    Returns:
        Same keys as :func:`coordinate_descent`.

    Raises:
        ValueError: If ``charts`` is empty.
    """
    _require_charts(charts)
    rng = np.random.default_rng(seed)

    best_params = (base_params or StepParams()).clamped()
    baseline_error = mean_squared_error(charts, best_params, search)
    best_error = baseline_error
    if verbose:
        print(f"Baseline error: {baseline_error:.4f}")

    for i in range(iterations):
        candidate = perturb(best_params, rng)
        err = mean_squared_error(charts, candidate, search)
        if err < best_error:
            best_params, best_error = candidate, err
            if verbose:
                print(f"  iteration {i}: better params {best_params.to_vector()}, err {err:.4f}")

    return _result(best_params, baseline_error, best_error, output_path, verbose)
