from __future__ import annotations


class PlotDataError(ValueError):
    """Input that cannot be turned into a series at all."""


class ConfigurationError(ValueError):
    """Invalid colour scale, load option or chunk size."""


class ValidationWarning(UserWarning):
    """Non-fatal data problem; processing continues."""
