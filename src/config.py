"""Engine configuration and logging setup for Stamina Rater.

Loads ``configs/step_params.yaml``: the five step constants at top level
and a ``search:`` mapping for the beam search. Any search key missing from
the file falls back to the engine's built-in constant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.stamina_engine.rate import BEAM_WIDTH, RATING_SCALE, WINDOW
from src.stamina_engine.step_params import StepParams


# ── Project paths ─────────────────────────────────────────────
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH: Path = PROJECT_ROOT / "configs" / "step_params.yaml"

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@dataclass(frozen=True)
class SearchSettings:
    window: int = WINDOW
    beam_width: int = BEAM_WIDTH
    rating_scale: float = RATING_SCALE


@dataclass(frozen=True)
class EngineConfig:
    params: StepParams = field(default_factory=StepParams)
    search: SearchSettings = field(default_factory=SearchSettings)


def _search_settings(raw: Any, source: Path) -> SearchSettings:
    if raw is None:
        return SearchSettings()
    if not isinstance(raw, dict):
        raise ValueError(f"'search' must be a mapping in: {source}")

    settings = SearchSettings(
        window=int(raw.get("window", WINDOW)),
        beam_width=int(raw.get("beam_width", BEAM_WIDTH)),
        rating_scale=float(raw.get("rating_scale", RATING_SCALE)),
    )
    if settings.window < 1 or settings.beam_width < 1:
        raise ValueError(f"search window and beam_width must be >= 1 in: {source}")
    if settings.rating_scale <= 0:
        raise ValueError(f"search rating_scale must be positive in: {source}")
    return settings


def load_config(config_path: str | Path | None = None) -> EngineConfig:
    """Load step constants and search settings from YAML.

    Args:
        config_path: Path to the YAML file.
            Defaults to ``configs/step_params.yaml``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a required key is missing or a value is invalid.
    """
    path = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        cfg = yaml.safe_load(fh)
    if not isinstance(cfg, dict):
        raise ValueError(f"Engine config must be a YAML mapping: {path}")

    return EngineConfig(
        params=StepParams.from_mapping(cfg, source=str(path)),
        search=_search_settings(cfg.get("search"), path),
    )


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for command-line use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=_LOG_FORMAT,
    )
