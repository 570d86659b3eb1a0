from chunkplot.adapters import series_from_arrays
from chunkplot.api import load_series
from chunkplot.colors import (
    NAMED_COLOR_SCALES,
    ColorScale,
    custom_color_scale,
    interpolate,
    map_value_to_color,
    parse_color,
    resolve_color_scale,
    to_css_rgba,
    to_hex,
)
from chunkplot.config import DEFAULT_OPTIONS, ProgressiveOptions, apply_defaults, optimal_chunk_size
from chunkplot.errors import ConfigurationError, PlotDataError, ValidationWarning
from chunkplot.progressive import ChunkProgress, LoadSnapshot, ProgressiveLoadController, next_state, plan_chunks
from chunkplot.series import ErrorBarStyle, LineStyle, MarkerStyle, Point, Series, SeriesStyle
from chunkplot.stats import StatisticsSnapshot, aggregate, format_bytes, format_large_number
from chunkplot.traces import (
    DEFAULT_PALETTE,
    ColorBar,
    ErrorBarTrace,
    LineAppearance,
    LineTrace,
    MarkerSetTrace,
    TraceSynthesizer,
    color_bar_owner,
    synthesize,
    synthesize_all,
)
from chunkplot.validation import ValidationIssue, ValidationReport, drop_invalid_points, validate_series

__all__ = [
    "ChunkProgress",
    "ColorBar",
    "ColorScale",
    "ConfigurationError",
    "DEFAULT_OPTIONS",
    "DEFAULT_PALETTE",
    "ErrorBarStyle",
    "ErrorBarTrace",
    "LineAppearance",
    "LineStyle",
    "LineTrace",
    "LoadSnapshot",
    "MarkerSetTrace",
    "MarkerStyle",
    "NAMED_COLOR_SCALES",
    "PlotDataError",
    "Point",
    "ProgressiveLoadController",
    "ProgressiveOptions",
    "Series",
    "SeriesStyle",
    "StatisticsSnapshot",
    "TraceSynthesizer",
    "ValidationIssue",
    "ValidationReport",
    "ValidationWarning",
    "aggregate",
    "apply_defaults",
    "color_bar_owner",
    "custom_color_scale",
    "drop_invalid_points",
    "format_bytes",
    "format_large_number",
    "interpolate",
    "load_series",
    "map_value_to_color",
    "next_state",
    "optimal_chunk_size",
    "parse_color",
    "plan_chunks",
    "resolve_color_scale",
    "series_from_arrays",
    "synthesize",
    "synthesize_all",
    "to_css_rgba",
    "to_hex",
    "validate_series",
]
