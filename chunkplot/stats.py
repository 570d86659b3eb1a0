from __future__ import annotations

from dataclasses import dataclass
import math
import numbers
from typing import Iterable, Sequence

from chunkplot.series import Series


BYTES_PER_POINT = 100
_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")


@dataclass(frozen=True)
class StatisticsSnapshot:
    total_points: int
    series_count: int
    x_range: tuple[float, float]
    y_range: tuple[float, float]
    z_range: tuple[float, float] | None
    estimated_bytes: int

    @property
    def memory_usage_mb(self) -> float:
        return self.estimated_bytes / (1024.0 * 1024.0)

    @property
    def memory_label(self) -> str:
        return format_bytes(self.estimated_bytes)


class _RunningRange:
    __slots__ = ("lo", "hi")

    def __init__(self) -> None:
        self.lo = math.inf
        self.hi = -math.inf

    def add(self, value: object) -> None:
        if not _is_number(value):
            return
        if value < self.lo:  # type: ignore[operator]
            self.lo = float(value)  # type: ignore[arg-type]
        if value > self.hi:  # type: ignore[operator]
            self.hi = float(value)  # type: ignore[arg-type]

    @property
    def seen(self) -> bool:
        return self.lo <= self.hi

    def as_tuple(self) -> tuple[float, float]:
        return (self.lo, self.hi) if self.seen else (0.0, 0.0)


def aggregate(series: Sequence[Series]) -> StatisticsSnapshot:
    """Single pass over every point of every series.

    Points with a missing or NaN coordinate still count toward ``total_points``;
    only the affected axis skips them. ``z_range`` stays ``None`` unless some
    point carries a z value.
    """
    xs = _RunningRange()
    ys = _RunningRange()
    zs = _RunningRange()
    total = 0
    for entry in series:
        for point in _points_of(entry):
            total += 1
            xs.add(getattr(point, "x", None))
            ys.add(getattr(point, "y", None))
            zs.add(getattr(point, "z", None))

    return StatisticsSnapshot(
        total_points=total,
        series_count=len(series),
        x_range=xs.as_tuple(),
        y_range=ys.as_tuple(),
        z_range=zs.as_tuple() if zs.seen else None,
        estimated_bytes=total * BYTES_PER_POINT,
    )


def format_bytes(num_bytes: float, decimals: int = 1) -> str:
    if num_bytes == 0:
        return "0 B"
    if not math.isfinite(num_bytes) or num_bytes < 0:
        return "Invalid"
    idx = 0
    value = float(num_bytes)
    while value >= 1024.0 and idx < len(_BYTE_UNITS) - 1:
        value /= 1024.0
        idx += 1
    scaled = round(value, max(0, decimals))
    return f"{scaled:g} {_BYTE_UNITS[idx]}"


def format_large_number(num: float) -> str:
    if not math.isfinite(num):
        return "Invalid"
    abs_num = abs(num)
    sign = "-" if num < 0 else ""
    if abs_num < 1_000:
        return f"{num:g}"
    if abs_num < 1_000_000:
        return f"{sign}{abs_num / 1_000:.1f}K"
    if abs_num < 1_000_000_000:
        return f"{sign}{abs_num / 1_000_000:.1f}M"
    return f"{sign}{abs_num / 1_000_000_000:.1f}B"


def _points_of(entry: Series) -> Iterable[object]:
    points = getattr(entry, "points", None)
    return points if points is not None else ()


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return not math.isnan(value)
