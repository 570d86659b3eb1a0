from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal, Sequence, Union

from chunkplot.colors import ColorScale, map_value_to_color, parse_color, resolve_color_scale
from chunkplot.scales import color_bar_ticks
from chunkplot.series import RGBA, ColorFeature, ErrorBarStyle, Point, Series, SeriesMode, color_feature_value


DEFAULT_PALETTE: tuple[RGBA, ...] = (
    (62, 149, 255, 255),
    (255, 165, 0, 255),
    (94, 200, 120, 255),
    (232, 86, 102, 255),
    (171, 120, 255, 255),
    (64, 196, 208, 255),
)


@dataclass(frozen=True)
class LineAppearance:
    color: RGBA
    width: int = 2
    dash: str = "solid"
    shape: str = "linear"


@dataclass(frozen=True)
class ColorBar:
    title: str
    cmin: float
    cmax: float
    stops: tuple[tuple[float, RGBA], ...]
    ticks: tuple[float, ...]
    tick_labels: tuple[str, ...]


@dataclass(frozen=True)
class LineTrace:
    name: str
    x: tuple[float, ...]
    y: tuple[float, ...]
    line: LineAppearance
    show_legend: bool = True
    hoverable: bool = True
    kind: Literal["line"] = "line"


@dataclass(frozen=True)
class MarkerSetTrace:
    name: str
    mode: SeriesMode
    x: tuple[float, ...]
    y: tuple[float, ...]
    labels: tuple[str | None, ...]
    marker_color: RGBA
    size: int
    symbol: str
    opacity: float
    colors: tuple[RGBA, ...] | None = None
    color_values: tuple[float, ...] | None = None
    line: LineAppearance | None = None
    show_legend: bool = True
    color_bar: ColorBar | None = None
    kind: Literal["markers"] = "markers"


@dataclass(frozen=True)
class ErrorBarTrace:
    name: str
    axis: Literal["x", "y"]
    x: tuple[float, ...]
    y: tuple[float, ...]
    magnitudes: tuple[float, ...]
    color: RGBA
    thickness: int = 2
    kind: Literal["error_bars"] = "error_bars"


Trace = Union[LineTrace, MarkerSetTrace, ErrorBarTrace]


@dataclass(frozen=True)
class _ColorMapping:
    feature: ColorFeature
    scale: ColorScale
    cmin: float
    cmax: float


class TraceSynthesizer:
    """Turns one series plus a prefix of its points into trace primitives.

    Colour normalization always uses the full series range (or the marker's
    explicit ``color_min``/``color_max``), so a growing point buffer keeps the
    same colours for points it already contained.
    """

    def __init__(self, palette: Sequence[RGBA] = DEFAULT_PALETTE) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self._palette = tuple(parse_color(c) for c in palette)

    def synthesize(
        self,
        series: Series,
        points: Sequence[Point],
        *,
        series_index: int = 0,
        show_color_bar: bool = True,
    ) -> list[Trace]:
        if not series.visible or not points:
            return []

        pts = tuple(points)
        xs = tuple(p.x for p in pts)
        ys = tuple(p.y for p in pts)
        base = self._base_color(series, series_index)
        mapping = _color_mapping(series)
        line_style = series.style.line
        gradient_requested = series.connect_adjacent and series.use_gradient_segments

        traces: list[Trace] = []
        if gradient_requested and len(pts) > 1:
            traces.extend(_gradient_segments(series, pts, base, mapping))

        main_mode = _main_mode(series)
        name = f"{series.name} ({len(pts):,} pts)"
        if main_mode == "lines":
            line = LineAppearance(color=base, width=line_style.width, dash=line_style.dash, shape=line_style.shape)
            traces.append(LineTrace(name=name, x=xs, y=ys, line=line, show_legend=series.show_in_legend))
        else:
            marker_line = None
            if main_mode == "lines+markers":
                marker_line = LineAppearance(color=base, width=line_style.width, dash=line_style.dash, shape=line_style.shape)
            traces.append(self._marker_trace(series, pts, xs, ys, name, main_mode, base, marker_line, mapping, show_color_bar))

        traces.extend(_error_bar_traces(series, pts, xs, ys, base))
        return traces

    def synthesize_all(self, series: Sequence[Series]) -> list[Trace]:
        owner = color_bar_owner(series)
        out: list[Trace] = []
        for idx, entry in enumerate(series):
            out.extend(self.synthesize(entry, entry.points, series_index=idx, show_color_bar=(idx == owner)))
        return out

    def _base_color(self, series: Series, series_index: int) -> RGBA:
        if series.style.line.color is not None:
            return parse_color(series.style.line.color)
        return self._palette[series_index % len(self._palette)]

    def _marker_trace(
        self,
        series: Series,
        pts: tuple[Point, ...],
        xs: tuple[float, ...],
        ys: tuple[float, ...],
        name: str,
        mode: SeriesMode,
        base: RGBA,
        line: LineAppearance | None,
        mapping: _ColorMapping | None,
        show_color_bar: bool,
    ) -> MarkerSetTrace:
        marker = series.style.marker
        marker_color = parse_color(marker.color) if marker.color is not None else base
        colors = None
        values = None
        bar = None
        if mapping is not None:
            values = tuple(_value_or_zero(color_feature_value(p, mapping.feature)) for p in pts)
            colors = tuple(map_value_to_color(v, mapping.cmin, mapping.cmax, mapping.scale) for v in values)
            if show_color_bar and marker.show_color_bar:
                ticks, labels = color_bar_ticks(mapping.cmin, mapping.cmax)
                bar = ColorBar(
                    title=marker.color_bar_title or mapping.feature,
                    cmin=mapping.cmin,
                    cmax=mapping.cmax,
                    stops=mapping.scale.stops,
                    ticks=ticks,
                    tick_labels=labels,
                )
        return MarkerSetTrace(
            name=name,
            mode=mode,
            x=xs,
            y=ys,
            labels=tuple(p.label for p in pts),
            marker_color=marker_color,
            size=marker.size,
            symbol=marker.symbol,
            opacity=marker.opacity,
            colors=colors,
            color_values=values,
            line=line,
            show_legend=series.show_in_legend,
            color_bar=bar,
        )


def color_bar_owner(series: Sequence[Series]) -> int | None:
    """Index of the one series allowed to display the shared colour bar."""
    for idx, entry in enumerate(series):
        if entry.visible and entry.color_mapped:
            return idx
    return None


_DEFAULT_SYNTHESIZER = TraceSynthesizer()


def synthesize(series: Series, points: Sequence[Point], *, series_index: int = 0, show_color_bar: bool = True) -> list[Trace]:
    return _DEFAULT_SYNTHESIZER.synthesize(series, points, series_index=series_index, show_color_bar=show_color_bar)


def synthesize_all(series: Sequence[Series]) -> list[Trace]:
    return _DEFAULT_SYNTHESIZER.synthesize_all(series)


def _main_mode(series: Series) -> SeriesMode:
    # Unconnected series and gradient series both draw their main trace as bare markers.
    if not series.connect_adjacent or series.use_gradient_segments:
        return "markers"
    return series.style.mode


def _color_mapping(series: Series) -> _ColorMapping | None:
    marker = series.style.marker
    feature = marker.color_feature
    if feature is None or not series.color_mapped:
        return None
    lo = math.inf
    hi = -math.inf
    for p in series.points:
        value = color_feature_value(p, feature)
        if value is None or math.isnan(value):
            continue
        lo = min(lo, value)
        hi = max(hi, value)
    cmin = float(marker.color_min) if marker.color_min is not None else lo
    cmax = float(marker.color_max) if marker.color_max is not None else hi
    return _ColorMapping(feature=feature, scale=resolve_color_scale(marker.color_scale), cmin=cmin, cmax=cmax)


def _gradient_segments(
    series: Series,
    pts: tuple[Point, ...],
    base: RGBA,
    mapping: _ColorMapping | None,
) -> list[LineTrace]:
    style = series.style.line
    segments: list[LineTrace] = []
    for a, b in zip(pts, pts[1:]):
        if mapping is None:
            color = base
        else:
            avg = (
                _value_or_zero(color_feature_value(a, mapping.feature))
                + _value_or_zero(color_feature_value(b, mapping.feature))
            ) / 2.0
            color = map_value_to_color(avg, mapping.cmin, mapping.cmax, mapping.scale)
        segments.append(
            LineTrace(
                name="",
                x=(a.x, b.x),
                y=(a.y, b.y),
                line=LineAppearance(color=color, width=style.width, dash=style.dash, shape=style.shape),
                show_legend=False,
                hoverable=False,
            )
        )
    return segments


def _error_bar_traces(
    series: Series,
    pts: tuple[Point, ...],
    xs: tuple[float, ...],
    ys: tuple[float, ...],
    base: RGBA,
) -> list[ErrorBarTrace]:
    out: list[ErrorBarTrace] = []
    axes: tuple[tuple[Literal["x", "y"], ErrorBarStyle | None], ...] = (
        ("x", series.style.error_x),
        ("y", series.style.error_y),
    )
    for axis, style in axes:
        if style is None or not style.visible:
            continue
        attr = f"error_{axis}"
        if not any(getattr(p, attr) is not None for p in series.points):
            continue
        out.append(
            ErrorBarTrace(
                name=f"{series.name} error {axis}",
                axis=axis,
                x=xs,
                y=ys,
                magnitudes=tuple(_value_or_zero(getattr(p, attr)) for p in pts),
                color=parse_color(style.color) if style.color is not None else base,
                thickness=style.thickness,
            )
        )
    return out


def _value_or_zero(value: float | None) -> float:
    if value is None or math.isnan(value):
        return 0.0
    return float(value)
