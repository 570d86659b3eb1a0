from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Sequence, Union


RGBA = tuple[int, int, int, int]
Color = Union[str, tuple[int, int, int], RGBA]
ColorStop = tuple[float, Color]
ColorScaleSpec = Union[str, Sequence[ColorStop]]

SeriesMode = Literal["markers", "lines", "lines+markers"]
ColorFeature = Literal["value", "x", "y", "z"]
LineDash = Literal["solid", "dash", "dot", "dashdot", "longdash"]
LineShape = Literal["linear", "spline", "hv", "vh", "hvh", "vhv"]


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    z: float | None = None
    color_value: float | None = None
    error_x: float | None = None
    error_y: float | None = None
    label: str | None = None


@dataclass(frozen=True)
class LineStyle:
    color: Color | None = None
    width: int = 2
    dash: LineDash = "solid"
    shape: LineShape = "linear"


@dataclass(frozen=True)
class MarkerStyle:
    color: Color | None = None
    size: int = 6
    symbol: str = "circle"
    opacity: float = 0.8
    color_feature: ColorFeature | None = None
    color_scale: ColorScaleSpec = "viridis"
    color_min: float | None = None
    color_max: float | None = None
    show_color_bar: bool = False
    color_bar_title: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.color_scale, str):
            # Stops arrive as lists from callers; keep the style hashable and comparable.
            object.__setattr__(self, "color_scale", tuple((pos, color) for pos, color in self.color_scale))


@dataclass(frozen=True)
class ErrorBarStyle:
    visible: bool = True
    color: Color | None = None
    thickness: int = 2


@dataclass(frozen=True)
class SeriesStyle:
    mode: SeriesMode = "lines+markers"
    line: LineStyle = field(default_factory=LineStyle)
    marker: MarkerStyle = field(default_factory=MarkerStyle)
    error_x: ErrorBarStyle | None = None
    error_y: ErrorBarStyle | None = None


@dataclass(frozen=True)
class Series:
    name: str
    points: tuple[Point, ...] = ()
    style: SeriesStyle = field(default_factory=SeriesStyle)
    visible: bool = True
    connect_adjacent: bool = True
    use_gradient_segments: bool = False
    show_in_legend: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    @property
    def color_mapped(self) -> bool:
        feature = self.style.marker.color_feature
        if feature is None:
            return False
        return any(color_feature_value(p, feature) is not None for p in self.points)


def color_feature_value(point: Point, feature: ColorFeature) -> float | None:
    if feature == "x":
        return point.x
    if feature == "y":
        return point.y
    if feature == "z":
        return point.z
    return point.color_value
