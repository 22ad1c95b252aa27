"""Dataset — load labelled charts for fitting the step constants.

A chart's label is its meter (``level`` in the ``#NOTES`` header).
Charts without a positive level carry no label and are skipped.
Preset unbroken streams (:meth:`Chart.presets`) can be mixed in.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from src.stamina_engine.chart import Chart
from src.stamina_engine.sm_parser import find_sm_files, load_sm

logger = logging.getLogger(__name__)


def load_labelled_charts(sm_path: str | Path) -> list[Chart]:
    """Load the charts of one simfile that carry a positive level."""
    charts = load_sm(sm_path)
    labelled = [c for c in charts if c.rating > 0]
    skipped = len(charts) - len(labelled)
    if skipped:
        logger.info("Skipped %d unlabelled chart(s) in %s", skipped, sm_path)
    return labelled


def load_training_set(
    paths: Iterable[str | Path] = (),
    use_presets: bool = False,
    only_longest: bool = False,
) -> list[Chart]:
    """Collect labelled charts from simfiles and, optionally, presets.

    Args:
        paths: Simfiles or directories searched recursively for ``.sm`` files.
        use_presets: Append the historical preset streams.
        only_longest: With *use_presets*, keep only the 512-measure streams.

    Returns:
        Charts with ``rating`` set to their level. Charts without notes
        are dropped.

    Raises:
        FileNotFoundError: If an input path does not exist.
        ValueError: If no labelled chart was found.
    """
    charts: list[Chart] = []
    for sm_file in find_sm_files(paths):
        charts.extend(load_labelled_charts(sm_file))
    if use_presets:
        charts.extend(Chart.presets(only_longest=only_longest))

    charts = [c for c in charts if c.notes]
    if not charts:
        raise ValueError(
            "No labelled charts found. "
            "Pass .sm files whose charts have a level, or use the presets."
        )
    return charts
