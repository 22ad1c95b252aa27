"""Step Params — the five tunable constants of the step-fatigue model.

Values are normally loaded from ``configs/step_params.yaml``.
If a required key is missing from the YAML, a ``ValueError`` is raised
with a clear message; the same happens for non-positive values.

Constants:
    base_fatigue_per_step   – flat cost of any step
    fatigue_per_step_ratio  – scales the whole step-cost term
    fatigue_dist_ratio      – cost per unit of panel travel distance
    fatigue_decay_rate      – exponential recovery rate per second of rest
    rest_time_add_constant  – floor added to rest time in the cost denominator
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields, replace
from pathlib import Path
from typing import Any, Sequence

import yaml


# ── Parameter order used by the fitting tools ─────────────────
PARAM_KEYS: list[str] = [
    "base_fatigue_per_step",
    "fatigue_per_step_ratio",
    "fatigue_dist_ratio",
    "fatigue_decay_rate",
    "rest_time_add_constant",
]

# Smallest value a fitted constant is clamped to.
PARAM_EPSILON: float = 1e-4


@dataclass(frozen=True)
class StepParams:
    """Immutable step-fatigue constants. Defaults are the historical fit."""

    base_fatigue_per_step: float = 4.8647046
    fatigue_per_step_ratio: float = 32.294823
    fatigue_dist_ratio: float = 1.6507491
    fatigue_decay_rate: float = 0.020347526
    rest_time_add_constant: float = 0.5731187

    # ── Construction ──────────────────────────────────────────

    @classmethod
    def from_mapping(cls, cfg: dict[str, Any], source: str = "<mapping>") -> StepParams:
        """Build params from a config mapping, validating every key.

        Args:
            cfg: Mapping holding (at least) the five keys of ``PARAM_KEYS``.
            source: Where the mapping came from, for error messages.

        Raises:
            ValueError: If a key is missing or a value is not positive.
        """
        values: dict[str, float] = {}
        for key in PARAM_KEYS:
            if key not in cfg:
                raise ValueError(f"Missing required key '{key}' in step config: {source}")
            value = float(cfg[key])
            if value <= 0:
                raise ValueError(
                    f"Step constant '{key}' must be positive, got {value} in: {source}"
                )
            values[key] = value
        return cls(**values)

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> StepParams:
        """Load params from a YAML file.

        Raises:
            FileNotFoundError: If *config_path* does not exist.
            ValueError: If the file is not a mapping or fails validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Step config not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as fh:
            cfg = yaml.safe_load(fh)

        if not isinstance(cfg, dict):
            raise ValueError(f"Step config must be a YAML mapping: {config_path}")
        return cls.from_mapping(cfg, source=str(config_path))

    @classmethod
    def from_vector(cls, values: Sequence[float]) -> StepParams:
        """Build params from an ordered 5-vector (see ``PARAM_KEYS``)."""
        if len(values) != len(PARAM_KEYS):
            raise ValueError(
                f"Expected {len(PARAM_KEYS)} step constants, got {len(values)}"
            )
        return cls(*(float(v) for v in values))

    # ── Conversion ────────────────────────────────────────────

    def to_vector(self) -> list[float]:
        return list(astuple(self))

    def to_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def with_value(self, key: str, value: float) -> StepParams:
        if key not in PARAM_KEYS:
            raise ValueError(f"Unknown step constant '{key}'")
        return replace(self, **{key: float(value)})

    def clamped(self, epsilon: float = PARAM_EPSILON) -> StepParams:
        """Return a copy with every non-positive constant raised to *epsilon*."""
        return StepParams.from_vector([v if v > 0 else epsilon for v in self.to_vector()])
