from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any
import warnings

import numpy as np

from chunkplot.errors import PlotDataError, ValidationWarning
from chunkplot.series import Point, Series, SeriesStyle


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def series_from_arrays(
    name: str,
    y: Any = None,
    *,
    x: Any = None,
    z: Any = None,
    color: Any = None,
    labels: Sequence[str | None] | None = None,
    data: Any = None,
    style: SeriesStyle | None = None,
    **series_kwargs: Any,
) -> Series:
    """Build a :class:`Series` from array-like columns.

    ``x``/``y``/``z``/``color`` accept lists, numpy arrays, pandas Series and
    1-D torch tensors, or column names when ``data`` is a DataFrame. ``x``
    defaults to the sample index. Points whose x or y is not finite are
    dropped with a :class:`ValidationWarning`.
    """
    y_values = _resolve_input(y, key="y", data=data)
    if y_values is None:
        raise PlotDataError("y input is required")
    y_arr = _coerce_1d_numeric(y_values, label="y")
    if y_arr.size == 0:
        raise PlotDataError("empty series")

    if x is None:
        x_arr = np.arange(y_arr.size, dtype=np.float64)
    else:
        x_arr = _coerce_1d_numeric(_resolve_input(x, key="x", data=data), label="x")
    _check_length(x_arr, y_arr, "x")

    z_arr = _optional_column(z, key="z", data=data, like=y_arr)
    c_arr = _optional_column(color, key="color", data=data, like=y_arr)
    if labels is not None and len(labels) != y_arr.size:
        raise PlotDataError(f"labels and y length mismatch: {len(labels)} != {y_arr.size}")

    mask = np.isfinite(x_arr) & np.isfinite(y_arr)
    if not np.any(mask):
        raise PlotDataError("series contains no finite points")
    dropped = int(mask.size - np.count_nonzero(mask))
    if dropped:
        warnings.warn(
            f"dropped {dropped} non-finite point(s) from series {name!r}",
            ValidationWarning,
            stacklevel=2,
        )

    points = tuple(
        Point(
            x=float(x_arr[i]),
            y=float(y_arr[i]),
            z=_finite_or_none(z_arr, i),
            color_value=_finite_or_none(c_arr, i),
            label=labels[i] if labels is not None else None,
        )
        for i in np.flatnonzero(mask).tolist()
    )
    return Series(name=name, points=points, style=style or SeriesStyle(), **series_kwargs)


def _optional_column(value: Any, *, key: str, data: Any, like: np.ndarray) -> np.ndarray | None:
    if value is None:
        return None
    arr = _coerce_1d_numeric(_resolve_input(value, key=key, data=data), label=key)
    _check_length(arr, like, key)
    return arr


def _check_length(arr: np.ndarray, like: np.ndarray, label: str) -> None:
    if arr.shape != like.shape:
        raise PlotDataError(f"{label} and y length mismatch: {arr.size} != {like.size}")


def _finite_or_none(arr: np.ndarray | None, i: int) -> float | None:
    if arr is None or not np.isfinite(arr[i]):
        return None
    return float(arr[i])


def _resolve_input(value: Any, key: str, data: Any) -> Any:
    if data is not None:
        if pd is None:
            raise PlotDataError("pandas is required when using `data=`")
        if not isinstance(data, pd.DataFrame):
            raise PlotDataError("`data` must be a pandas DataFrame")
        if isinstance(value, str):
            if value not in data.columns:
                raise PlotDataError(f"column not found: {value}")
            return data[value]
        if value is None and key == "y":
            numeric_cols = [c for c in data.columns if _is_numeric_dtype(data[c])]
            if len(numeric_cols) != 1:
                raise PlotDataError("when y is omitted, data must have exactly one numeric column")
            return data[numeric_cols[0]]
        return value

    if pd is not None and isinstance(value, pd.DataFrame):
        numeric_cols = [c for c in value.columns if _is_numeric_dtype(value[c])]
        if len(numeric_cols) != 1:
            raise PlotDataError(f"{key} DataFrame input must contain exactly one numeric column")
        return value[numeric_cols[0]]

    return value


def _is_numeric_dtype(column: Any) -> bool:
    if pd is None:
        return False
    return bool(pd.api.types.is_numeric_dtype(column))


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        arr = np.asarray(value, dtype=object)
        if arr.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(arr, label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
        elif isinstance(raw, Decimal):
            out[i] = float(raw)
        else:
            try:
                out[i] = float(raw)
            except (TypeError, ValueError) as exc:
                raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
