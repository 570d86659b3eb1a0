from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from functools import lru_cache
import math
import re
from typing import Sequence

from PIL import ImageColor

from chunkplot.errors import ConfigurationError
from chunkplot.series import RGBA, Color, ColorScaleSpec, ColorStop


NAMED_COLOR_SCALES: dict[str, tuple[ColorStop, ...]] = {
    "viridis": (
        (0.0, "#440154"),
        (0.25, "#31688e"),
        (0.5, "#35b779"),
        (0.75, "#fde725"),
        (1.0, "#fde725"),
    ),
    "plasma": (
        (0.0, "#0d0887"),
        (0.25, "#7e03a8"),
        (0.5, "#cc4778"),
        (0.75, "#f89441"),
        (1.0, "#f0f921"),
    ),
    "turbo": (
        (0.0, "#23171b"),
        (0.25, "#1e6091"),
        (0.5, "#00a76c"),
        (0.75, "#bfbc00"),
        (1.0, "#b30000"),
    ),
    "cividis": (
        (0.0, "#00224e"),
        (0.25, "#123570"),
        (0.5, "#3b496c"),
        (0.75, "#575d6d"),
        (1.0, "#ffea46"),
    ),
    "rainbow": (
        (0.0, "#ff0000"),
        (0.17, "#ff8c00"),
        (0.33, "#ffd700"),
        (0.5, "#00ff00"),
        (0.67, "#0000ff"),
        (0.83, "#4b0082"),
        (1.0, "#9400d3"),
    ),
}

# Pillow reads rgba() alpha as 0-255; CSS writes it as a 0-1 fraction.
_CSS_RGBA = re.compile(
    r"^rgba\(\s*([0-9.]+)\s*,\s*([0-9.]+)\s*,\s*([0-9.]+)\s*,\s*([0-9.]+)\s*\)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ColorScale:
    """Parsed, validated stops. Channels are interpolated in linear RGBA."""

    stops: tuple[tuple[float, RGBA], ...]

    def __post_init__(self) -> None:
        if not self.stops:
            raise ConfigurationError("color scale must contain at least one stop")
        previous = -math.inf
        for position, _ in self.stops:
            if not math.isfinite(position) or position < 0.0 or position > 1.0:
                raise ConfigurationError(f"color stop position must be within [0, 1]: {position!r}")
            if position < previous:
                raise ConfigurationError("color stop positions must be non-decreasing")
            previous = position

    @property
    def positions(self) -> tuple[float, ...]:
        return tuple(position for position, _ in self.stops)

    def at(self, value: float) -> RGBA:
        if math.isnan(value):
            value = 0.0
        value = min(1.0, max(0.0, float(value)))

        first_pos, first_color = self.stops[0]
        if value <= first_pos:
            return first_color
        last_pos, last_color = self.stops[-1]
        if value >= last_pos:
            return last_color

        idx = bisect_right(self.positions, value)
        pos_a, color_a = self.stops[idx - 1]
        pos_b, color_b = self.stops[idx]
        if pos_b == pos_a:
            return color_a
        t = (value - pos_a) / (pos_b - pos_a)
        return _lerp_rgba(color_a, color_b, t)


def interpolate(scale: ColorScale | ColorScaleSpec, value: float) -> RGBA:
    """Map ``value`` (clamped to [0, 1]) onto ``scale``."""
    return resolve_color_scale(scale).at(value)


def map_value_to_color(value: float, vmin: float, vmax: float, scale: ColorScale | ColorScaleSpec) -> RGBA:
    """Normalize ``value`` against ``[vmin, vmax]`` and interpolate; a flat range maps to 0."""
    resolved = resolve_color_scale(scale)
    span = vmax - vmin
    if span == 0 or not math.isfinite(span):
        return resolved.at(0.0)
    return resolved.at((value - vmin) / span)


def resolve_color_scale(scale: ColorScale | ColorScaleSpec) -> ColorScale:
    if isinstance(scale, ColorScale):
        return scale
    if isinstance(scale, str):
        return _named_scale(scale.strip().lower())
    if scale is None:
        raise ConfigurationError("color scale is required")
    try:
        raw = [(pos, color) for pos, color in scale]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError("color scale must be a sequence of (position, color) pairs") from exc
    stops: list[tuple[float, RGBA]] = []
    for pos, color in raw:
        if isinstance(pos, bool) or not isinstance(pos, (int, float)):
            raise ConfigurationError(f"color stop position must be numeric: {pos!r}")
        stops.append((float(pos), parse_color(color)))
    return ColorScale(stops=tuple(stops))


@lru_cache(maxsize=32)
def _named_scale(name: str) -> ColorScale:
    stops = NAMED_COLOR_SCALES.get(name)
    if stops is None:
        known = ", ".join(sorted(NAMED_COLOR_SCALES))
        raise ConfigurationError(f"unknown color scale: {name!r} (known: {known})")
    return ColorScale(stops=tuple((float(pos), parse_color(color)) for pos, color in stops))


def custom_color_scale(colors: Sequence[Color]) -> ColorScale:
    """Space ``colors`` evenly across [0, 1]."""
    if not colors:
        raise ConfigurationError("custom color scale needs at least one color")
    if len(colors) == 1:
        parsed = parse_color(colors[0])
        return ColorScale(stops=((0.0, parsed), (1.0, parsed)))
    step = 1.0 / float(len(colors) - 1)
    stops = [(min(1.0, i * step), parse_color(color)) for i, color in enumerate(colors)]
    return ColorScale(stops=tuple(stops))


def parse_color(color: Color) -> RGBA:
    if isinstance(color, tuple):
        return _coerce_rgba_tuple(color)
    if not isinstance(color, str) or not color.strip():
        raise ConfigurationError(f"unsupported color: {color!r}")
    text = color.strip()
    match = _CSS_RGBA.match(text)
    if match is not None:
        r, g, b, alpha = (float(v) for v in match.groups())
        if alpha > 1.0:
            raise ConfigurationError(f"rgba() alpha must be within [0, 1]: {text!r}")
        return _coerce_rgba_tuple((_round_half_up(r), _round_half_up(g), _round_half_up(b), _round_half_up(alpha * 255.0)))
    try:
        rgba = ImageColor.getcolor(text, "RGBA")
    except ValueError as exc:
        raise ConfigurationError(f"unsupported color: {text!r}") from exc
    return _coerce_rgba_tuple(tuple(rgba))


def to_hex(color: RGBA, *, include_alpha: bool = False) -> str:
    r, g, b, a = color
    if include_alpha:
        return f"#{r:02x}{g:02x}{b:02x}{a:02x}"
    return f"#{r:02x}{g:02x}{b:02x}"


def to_css_rgba(color: RGBA) -> str:
    r, g, b, a = color
    alpha = round(a / 255.0, 3)
    return f"rgba({r}, {g}, {b}, {alpha:g})"


def _coerce_rgba_tuple(color: tuple) -> RGBA:
    if len(color) == 3:
        color = (*color, 255)
    if len(color) != 4:
        raise ConfigurationError(f"color tuple must have 3 or 4 channels: {color!r}")
    out: list[int] = []
    for channel in color:
        if isinstance(channel, bool) or not isinstance(channel, (int, float)):
            raise ConfigurationError(f"color channel must be numeric: {color!r}")
        value = _round_half_up(float(channel))
        if value < 0 or value > 255:
            raise ConfigurationError(f"color channel out of range 0..255: {color!r}")
        out.append(value)
    return (out[0], out[1], out[2], out[3])


def _lerp_rgba(a: RGBA, b: RGBA, t: float) -> RGBA:
    return (
        _round_half_up(a[0] + (b[0] - a[0]) * t),
        _round_half_up(a[1] + (b[1] - a[1]) * t),
        _round_half_up(a[2] + (b[2] - a[2]) * t),
        _round_half_up(a[3] + (b[3] - a[3]) * t),
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
