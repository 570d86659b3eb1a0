from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from chunkplot.errors import ConfigurationError


@dataclass(frozen=True)
class ProgressiveOptions:
    """Progressive-loading knobs with their defaults."""

    enabled: bool = False
    chunk_size: int = 100
    inter_chunk_delay_ms: float = 50
    large_dataset_threshold: int = 50_000

    @property
    def inter_chunk_delay_s(self) -> float:
        return float(self.inter_chunk_delay_ms) / 1000.0


DEFAULT_OPTIONS = ProgressiveOptions()


def apply_defaults(overrides: ProgressiveOptions | Mapping[str, Any] | None = None) -> ProgressiveOptions:
    """Merge caller overrides over ``DEFAULT_OPTIONS`` and validate the result."""

    if isinstance(overrides, ProgressiveOptions):
        raw: dict[str, Any] = asdict(overrides)
    else:
        raw = asdict(DEFAULT_OPTIONS)
        if overrides:
            for key, value in overrides.items():
                if key not in raw:
                    raise ConfigurationError(f"Unknown progressive option: {key}")
                raw[key] = value

    if not isinstance(raw["enabled"], bool):
        raise ConfigurationError("Option `enabled` must be a bool")

    chunk_size = raw["chunk_size"]
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise ConfigurationError("chunk_size must be > 0")

    delay = raw["inter_chunk_delay_ms"]
    if isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay < 0:
        raise ConfigurationError("inter_chunk_delay_ms must be >= 0")

    threshold = raw["large_dataset_threshold"]
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold <= 0:
        raise ConfigurationError("large_dataset_threshold must be > 0")

    return ProgressiveOptions(
        enabled=raw["enabled"],
        chunk_size=chunk_size,
        inter_chunk_delay_ms=delay,
        large_dataset_threshold=threshold,
    )


def optimal_chunk_size(total_points: int) -> int:
    if total_points < 0:
        raise ValueError("total_points must be >= 0")
    if total_points < 1_000:
        return max(1, total_points)
    if total_points < 10_000:
        return 500
    if total_points < 100_000:
        return 1_000
    return 2_000
