from __future__ import annotations

from decimal import Decimal

import numpy as np


# (fraction cutoff, nice factor) for rounding a raw step to 1, 2 or 5 x 10^k.
_STEP_FACTORS = ((1.5, 1.0), (3.0, 2.0), (7.0, 5.0))


def nice_step(span: float, target: int) -> float:
    if not np.isfinite(span) or span <= 0:
        raise ValueError("span must be finite and > 0")
    raw = span / max(target - 1, 1)
    magnitude = 10.0 ** np.floor(np.log10(raw))
    frac = raw / magnitude
    for cutoff, factor in _STEP_FACTORS:
        if frac < cutoff:
            return float(factor * magnitude)
    return float(10.0 * magnitude)


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    """Evenly stepped ticks lying inside ``[vmin, vmax]``."""
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    step = nice_step(vmax - vmin, target)
    first = np.ceil(vmin / step - 1e-9) * step
    count = int(np.floor((vmax - first) / step + 1e-9)) + 1
    if count <= 0:
        return np.asarray([vmin, vmax], dtype=np.float64)
    ticks = np.rint((first + step * np.arange(count)) / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick_labels(ticks: np.ndarray) -> list[str]:
    """Labels sharing one decimal count, taken from the tick step."""
    if ticks.size == 0:
        return []
    step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else 0.0
    decimals = _decimals_for_step(step)
    return [_format_value(float(v), decimals) for v in ticks]


def color_bar_ticks(cmin: float, cmax: float, target: int = 5) -> tuple[tuple[float, ...], tuple[str, ...]]:
    """Tick values and labels for a colour bar spanning ``[cmin, cmax]``."""
    if not (np.isfinite(cmin) and np.isfinite(cmax)):
        return ((), ())
    lo, hi = (cmin, cmax) if cmin <= cmax else (cmax, cmin)
    ticks = generate_nice_ticks(lo, hi, target)
    return (tuple(float(v) for v in ticks.tolist()), tuple(format_tick_labels(ticks)))


def _decimals_for_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    exponent = Decimal(repr(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))


def _format_value(value: float, decimals: int) -> str:
    if not np.isfinite(value):
        return str(value)
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text
