"""
config.py
---------

Configuration of a staircase run.

StaircaseConfig is read once when a test starts and stays fixed for the
whole run. It is validated on construction, so a controller can never be
started from an invalid configuration.

Settings usually arrive as strings from a settings form;
StaircaseConfig.from_settings parses them. The frame-rate difference is
entered there in percent (``"10"`` -> 0.10).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Mapping


class ConfigError(ValueError):
    """Configuration is missing, non-numeric or out of range."""


@dataclass(frozen=True)
class StaircaseConfig:
    """
    Parameters of the adaptive frame-rate staircase.

    Attributes
    ----------
    start_base_fps : float
        Frame rate of the first trial's base stimulus.
    min_base_fps : float
        Lower clamp for the base frame rate. Must not exceed start_base_fps.
    target_diff_pct : float
        Relative difference of the comparison stimulus, as a fraction
        (0.05 = 5% faster).
    initial_step : float
        Initial staircase step in fps.
    min_step : float
        Floor for the step after halving on reversals.
    target_reversals : int
        Stop after this many reversals (>= 1).
    max_trials : int
        Stop after this many trials (>= 1).

    Examples
    --------
    >>> config = StaircaseConfig(start_base_fps=30, min_base_fps=10, target_diff_pct=0.10)
    >>> config = StaircaseConfig.from_settings({"start_base": "30", "diff_pct": "10"})
    """

    start_base_fps: float = 30.0
    min_base_fps: float = 10.0
    target_diff_pct: float = 0.10
    initial_step: float = 5.0
    min_step: float = 0.5
    target_reversals: int = 8
    max_trials: int = 60

    def __post_init__(self):
        """Validate configuration."""
        for name in (
            "start_base_fps",
            "min_base_fps",
            "target_diff_pct",
            "initial_step",
            "min_step",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigError(f"{name} must be finite, got {value}")

        for name in ("target_reversals", "max_trials"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ConfigError(f"{name} must be >= 1, got {value}")

        if self.min_base_fps <= 0:
            raise ConfigError(f"min_base_fps must be positive, got {self.min_base_fps}")
        if self.min_base_fps > self.start_base_fps:
            raise ConfigError(
                f"min_base_fps ({self.min_base_fps}) must not exceed "
                f"start_base_fps ({self.start_base_fps})"
            )
        if self.target_diff_pct < 0:
            raise ConfigError(
                f"target_diff_pct must be non-negative, got {self.target_diff_pct}"
            )
        if self.initial_step <= 0:
            raise ConfigError(f"initial_step must be positive, got {self.initial_step}")
        if self.min_step <= 0:
            raise ConfigError(f"min_step must be positive, got {self.min_step}")

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> StaircaseConfig:
        """
        Build a config from settings-form values.

        Recognised keys are the field names and the short form names
        ``start_base``, ``min_base``, ``diff_pct`` (in percent),
        ``initial_step``, ``min_step``, ``target_reversals`` and
        ``max_trials``. Missing keys fall back to the defaults.

        Raises
        ------
        ConfigError
            If a value cannot be parsed or the result is out of range.
        """
        kwargs: dict[str, Any] = {}
        for key, raw in settings.items():
            if key in _FORM_KEYS:
                name, scale = _FORM_KEYS[key]
            elif key in _FIELD_NAMES:
                name, scale = key, 1.0
            else:
                raise ConfigError(f"unknown setting {key!r}")

            if name in ("target_reversals", "max_trials"):
                kwargs[name] = _parse_int(name, raw)
            else:
                kwargs[name] = _parse_float(name, raw) * scale
        return cls(**kwargs)


_FIELD_NAMES = {f.name for f in fields(StaircaseConfig)}

# form key -> (field name, multiplier)
_FORM_KEYS = {
    "start_base": ("start_base_fps", 1.0),
    "min_base": ("min_base_fps", 1.0),
    "diff_pct": ("target_diff_pct", 0.01),
    "initial_step": ("initial_step", 1.0),
    "min_step": ("min_step", 1.0),
    "target_reversals": ("target_reversals", 1.0),
    "max_trials": ("max_trials", 1.0),
}


def _parse_float(name: str, raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from None
    if not math.isfinite(value):
        raise ConfigError(f"{name} must be finite, got {raw!r}")
    return value


def _parse_int(name: str, raw: Any) -> int:
    value = _parse_float(name, raw)
    if value != int(value):
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    return int(value)
