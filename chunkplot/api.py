from __future__ import annotations

from typing import Any, Sequence

from chunkplot.progressive import CompleteCallback, ProgressCallback, ProgressiveLoadController
from chunkplot.series import Series
from chunkplot.stats import StatisticsSnapshot
from chunkplot.traces import Trace, synthesize_all


async def load_series(
    series: Sequence[Series],
    *,
    on_progress: ProgressCallback | None = None,
    on_complete: CompleteCallback | None = None,
    **options: Any,
) -> tuple[tuple[Trace, ...], StatisticsSnapshot | None]:
    """Run one load on a fresh controller and return its final traces and statistics.

    Keyword options are the progressive-loading options (``enabled``,
    ``chunk_size``, ...). A failed load re-raises the captured error.
    """
    controller = ProgressiveLoadController()
    await controller.run(series, options, on_progress=on_progress, on_complete=on_complete)
    if controller.last_error is not None:
        raise controller.last_error
    return controller.traces, controller.statistics


__all__ = ["load_series", "synthesize_all"]
