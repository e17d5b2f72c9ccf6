import json
import math
import numbers
import pathlib
from dataclasses import dataclass, fields, replace

from .utils import get_logger

logger = get_logger("Config")


class ConfigurationError(ValueError):
    """Raised when tuning values would make alignment costs meaningless."""


@dataclass(frozen=True)
class AlignmentConfig:
    """
    Tuning constants for the aligner and the placeholder check.
    Defaults are starting points; tune them against real chapter lists.
    """
    time_window_ms: int = 30000         # Start offsets further apart than this never corroborate
    weight_time: float = 0.6            # Share of pair score from start-time proximity
    weight_text: float = 0.4            # Share of pair score from title similarity
    insert_cost: float = 0.7            # Leaving a local chapter unmatched
    delete_cost: float = 0.7            # Leaving a catalog chapter unmatched
    needs_update_threshold: float = 0.5  # Placeholder ratio that flags a book

    def validate(self) -> "AlignmentConfig":
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
                raise ConfigurationError(f"{f.name} must be a finite number, got {value!r}")
        if self.time_window_ms <= 0:
            raise ConfigurationError(f"time_window_ms must be positive, got {self.time_window_ms}")
        if self.weight_time < 0 or self.weight_text < 0:
            raise ConfigurationError(
                f"Weights must be non-negative, got time={self.weight_time} text={self.weight_text}"
            )
        if self.weight_time + self.weight_text == 0:
            raise ConfigurationError("weight_time and weight_text cannot both be zero")
        if self.insert_cost < 0 or self.delete_cost < 0:
            raise ConfigurationError(
                f"Costs must be non-negative, got insert={self.insert_cost} delete={self.delete_cost}"
            )
        if not 0.0 <= self.needs_update_threshold <= 1.0:
            raise ConfigurationError(
                f"needs_update_threshold must be within [0, 1], got {self.needs_update_threshold}"
            )
        return self

    def with_overrides(self, **overrides) -> "AlignmentConfig":
        """Returns a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_dict(cls, data: dict) -> "AlignmentConfig":
        known = [f.name for f in fields(cls)]
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key: {key}")
                continue
            values[key] = value
        return cls(**values)


def load_config(path: pathlib.Path) -> AlignmentConfig:
    """Reads an AlignmentConfig from a JSON object file."""
    path = pathlib.Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {path} must contain a JSON object")

    logger.info(f"Loaded alignment config from {path}")
    return AlignmentConfig.from_dict(data).validate()
