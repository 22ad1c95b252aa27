"""Stamina Rater — command-line entry point.

Rates every chart of the given simfiles (and, optionally, the preset
streams), optionally fitting the step constants first, and prints the
charts sorted by rating. The Streamlit viewer lives in
``app/streamlit_app.py``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from src.config import load_config, setup_logging
from src.fit_engine.dataset import load_training_set
from src.fit_engine.evaluator import evaluate_params
from src.fit_engine.trainer import coordinate_descent, hill_climb
from src.stamina_engine.chart import Chart
from src.stamina_engine.rate import evaluate
from src.stamina_engine.sm_parser import find_sm_files, load_sm

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stamina-rate",
        description="Rate dance charts by simulated foot fatigue.",
    )
    parser.add_argument("inputs", nargs="*", type=Path, help="Simfiles or directories of .sm files")
    parser.add_argument("-p", "--presets", action="store_true", help="Also rate the preset streams")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Step-constant YAML config")
    parser.add_argument(
        "--fit",
        choices=["none", "coordinate", "hill"],
        default="none",
        help="Fit the step constants to the chart levels before rating",
    )
    parser.add_argument(
        "-i", "--iterations", type=int, default=1000,
        help="Hill-climb iterations, or coordinate-descent rounds",
    )
    parser.add_argument("--fit-output", type=Path, default=None, help="Write fitted constants here")
    parser.add_argument("--json", type=Path, default=None, help="Write ratings and traces as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _collect_charts(inputs: list[Path], presets: bool) -> list[Chart]:
    charts: list[Chart] = []
    for sm_file in find_sm_files(inputs):
        print(f"Reading {sm_file}")
        charts.extend(load_sm(sm_file))
    if presets:
        charts.extend(Chart.presets())
    return charts


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(args.verbose)

    config = load_config(args.config)
    params = config.params
    search = config.search
    if args.fit != "none":
        training = load_training_set(args.inputs, use_presets=args.presets)
        if args.fit == "coordinate":
            result = coordinate_descent(
                training, params, max_rounds=args.iterations,
                output_path=args.fit_output, search=search,
            )
        else:
            result = hill_climb(
                training, params, iterations=args.iterations,
                output_path=args.fit_output, search=search,
            )
        params = result["params"]
        metrics = evaluate_params(training, params, search)
        print(
            f"Fitted on {len(training)} charts: mse {metrics['mse']:.4f}, "
            f"rsse {metrics['rsse']:.4f}, level accuracy {metrics['accuracy']:.1%}"
        )

    charts = _collect_charts(args.inputs, args.presets)
    if not charts:
        print("No simfiles?")
        return 1

    rated = []
    for chart in charts:
        result = evaluate(
            chart.notes, params, search.window, search.beam_width, search.rating_scale
        )
        logger.debug("%s: %.3f", chart.description(), result.rating)
        rated.append((chart, result))
    rated.sort(key=lambda pair: pair[1].rating)

    for chart, result in rated:
        print(
            f"{result.rating:>6.2f}: {chart.rating:2}, {len(chart.notes):6} notes - "
            f"{chart.description()}"
        )

    if args.json is not None:
        payload = [
            {
                "title": chart.title,
                "difficulty": chart.difficulty,
                "level": chart.rating,
                "rating": result.rating,
                "trace": result.trace(chart.notes),
            }
            for chart, result in rated
        ]
        args.json.parent.mkdir(parents=True, exist_ok=True)
        args.json.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote {args.json}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
