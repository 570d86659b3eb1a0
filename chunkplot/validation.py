from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import math
import numbers
from typing import Literal, Sequence
import warnings

from chunkplot.errors import ValidationWarning
from chunkplot.series import Point, Series


LOGGER = logging.getLogger(__name__)
LARGE_DATASET_THRESHOLD = 50_000


@dataclass(frozen=True)
class ValidationIssue:
    level: Literal["error", "warning"]
    field: str
    message: str
    code: str


@dataclass(frozen=True)
class ValidationReport:
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class _Collector:
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def error(self, field_name: str, message: str, code: str) -> None:
        self.errors.append(ValidationIssue("error", field_name, message, code))

    def warn(self, field_name: str, message: str, code: str) -> None:
        self.warnings.append(ValidationIssue("warning", field_name, message, code))

    def report(self) -> ValidationReport:
        return ValidationReport(errors=tuple(self.errors), warnings=tuple(self.warnings))


def validate_series(
    series: Sequence[Series],
    *,
    large_dataset_threshold: int = LARGE_DATASET_THRESHOLD,
) -> ValidationReport:
    """Check a series collection before loading.

    Structural problems are errors. Bad coordinates and oversized datasets are
    advisories: they are logged and reported, and loading may still proceed.
    """
    out = _Collector()
    if len(series) == 0:
        out.error("series", "At least one series is required", "EMPTY_SERIES")

    for index, entry in enumerate(series):
        prefix = f"series[{index}]"
        if not isinstance(entry.name, str) or not entry.name.strip():
            out.warn(f"{prefix}.name", "Series should have a descriptive name", "MISSING_NAME")
        if len(entry.points) == 0:
            out.error(f"{prefix}.points", "Series points cannot be empty", "EMPTY_DATA")
            continue
        if len(entry.points) > large_dataset_threshold:
            out.warn(
                f"{prefix}.points",
                f"Large dataset ({len(entry.points)} points) may impact performance",
                "LARGE_DATASET",
            )
        bad = [i for i, point in enumerate(entry.points) if not is_valid_point(point)]
        if bad:
            out.warn(
                f"{prefix}.points[{bad[0]}]",
                f"{len(bad)} point(s) have non-numeric or non-finite x/y",
                "INVALID_DATA_POINT",
            )

    report = out.report()
    for issue in report.warnings:
        LOGGER.warning("series validation %s at %s: %s", issue.code, issue.field, issue.message)
    return report


def drop_invalid_points(series: Series) -> Series:
    """Copy of ``series`` without points whose x/y are non-numeric or non-finite."""
    kept = tuple(point for point in series.points if is_valid_point(point))
    dropped = len(series.points) - len(kept)
    if dropped == 0:
        return series
    warnings.warn(
        f"dropped {dropped} invalid point(s) from series {series.name!r}",
        ValidationWarning,
        stacklevel=2,
    )
    return replace(series, points=kept)


def is_valid_point(point: Point) -> bool:
    return _finite_number(point.x) and _finite_number(point.y)


def _finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)
