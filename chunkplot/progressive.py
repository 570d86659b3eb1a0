from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
import logging
from typing import Any, Awaitable, Callable, Literal, Mapping, Sequence

from chunkplot.colors import resolve_color_scale
from chunkplot.config import ProgressiveOptions, apply_defaults
from chunkplot.series import Point, Series
from chunkplot.stats import StatisticsSnapshot, aggregate
from chunkplot.traces import Trace, TraceSynthesizer, color_bar_owner
from chunkplot.validation import validate_series


LOGGER = logging.getLogger(__name__)

LoadState = Literal["idle", "loading", "complete", "error"]
LoadEvent = Literal["start", "complete", "fail"]

ProgressCallback = Callable[[float, str, int], None]
CompleteCallback = Callable[[int, StatisticsSnapshot], None]
Sleep = Callable[[float], Awaitable[Any]]

READY_PHASE = "Ready"

_TRANSITIONS: dict[tuple[str, str], LoadState] = {
    ("idle", "start"): "loading",
    ("loading", "start"): "loading",
    ("complete", "start"): "loading",
    ("error", "start"): "loading",
    ("loading", "complete"): "complete",
    ("loading", "fail"): "error",
}


def next_state(state: LoadState, event: LoadEvent) -> LoadState:
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise ValueError(f"illegal load transition: {state} on {event}") from None


@dataclass(frozen=True)
class ChunkProgress:
    phase: str
    loaded_points: int
    total_points: int
    percentage: float


@dataclass(frozen=True)
class LoadSnapshot:
    token: int
    state: LoadState
    progress: ChunkProgress
    traces: tuple[Trace, ...]
    statistics: StatisticsSnapshot | None

    @property
    def trace_count(self) -> int:
        return len(self.traces)


Listener = Callable[[LoadSnapshot], None]


def plan_chunks(series: Sequence[Series], chunk_size: int) -> list[tuple[int, int, int]]:
    """``(series_index, start, stop)`` per chunk, in series then point order."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")
    plan: list[tuple[int, int, int]] = []
    for idx, entry in enumerate(series):
        count = len(entry.points)
        for start in range(0, count, chunk_size):
            plan.append((idx, start, min(count, start + chunk_size)))
    return plan


class ProgressiveLoadController:
    """Builds traces for a series collection, optionally in cooperative chunks.

    Every ``load`` takes a fresh request token. A run only publishes while its
    token is the newest one, so an overlapping request supersedes the older
    run, which then stops at its next suspension point.
    """

    def __init__(
        self,
        synthesizer: TraceSynthesizer | None = None,
        *,
        aggregator: Callable[[Sequence[Series]], StatisticsSnapshot] | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._synthesizer = synthesizer or TraceSynthesizer()
        self._aggregate = aggregator or aggregate
        self._sleep = sleep
        self._token = 0
        self._state: LoadState = "idle"
        self._traces: tuple[Trace, ...] = ()
        self._progress = ChunkProgress(phase=READY_PHASE, loaded_points=0, total_points=0, percentage=0.0)
        self._statistics: StatisticsSnapshot | None = None
        self._last_error: Exception | None = None
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state == "loading"

    @property
    def traces(self) -> tuple[Trace, ...]:
        return self._traces

    @property
    def progress(self) -> ChunkProgress:
        return self._progress

    @property
    def phase(self) -> str:
        return self._progress.phase

    @property
    def statistics(self) -> StatisticsSnapshot | None:
        return self._statistics

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def request_token(self) -> int:
        return self._token

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def load(
        self,
        series: Sequence[Series],
        options: ProgressiveOptions | Mapping[str, Any] | None = None,
        on_progress: ProgressCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> asyncio.Task[None] | None:
        """Start a load and return immediately.

        The immediate path finishes before returning and yields ``None``. The
        chunked path needs a running event loop and returns the scheduled task.
        """
        opts = apply_defaults(options)
        loop = asyncio.get_running_loop() if opts.enabled else None
        entries, token = self._begin(series, opts)
        if loop is None:
            self._run_immediate(token, entries, on_complete)
            return None
        task = loop.create_task(
            self._run_chunked(token, entries, opts, on_progress, on_complete),
            name=f"chunkplot-load-{token}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(
        self,
        series: Sequence[Series],
        options: ProgressiveOptions | Mapping[str, Any] | None = None,
        on_progress: ProgressCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> None:
        """Awaitable form of :meth:`load`."""
        opts = apply_defaults(options)
        entries, token = self._begin(series, opts)
        if not opts.enabled:
            self._run_immediate(token, entries, on_complete)
            return
        await self._run_chunked(token, entries, opts, on_progress, on_complete)

    def _begin(self, series: Sequence[Series], opts: ProgressiveOptions) -> tuple[tuple[Series, ...], int]:
        entries = tuple(series)
        for entry in entries:
            if entry.style.marker.color_feature is not None:
                resolve_color_scale(entry.style.marker.color_scale)
        report = validate_series(entries, large_dataset_threshold=opts.large_dataset_threshold)
        for issue in report.errors:
            LOGGER.warning("loading despite %s at %s: %s", issue.code, issue.field, issue.message)

        self._token += 1
        token = self._token
        self._state = next_state(self._state, "start")
        self._statistics = None
        self._last_error = None
        total = sum(len(entry.points) for entry in entries)
        self._progress = ChunkProgress(phase="Starting data loading...", loaded_points=0, total_points=total, percentage=0.0)
        LOGGER.debug("load %d started: series=%d points=%d chunked=%s", token, len(entries), total, opts.enabled)
        self._emit(token)
        return entries, token

    def _run_immediate(
        self,
        token: int,
        entries: tuple[Series, ...],
        on_complete: CompleteCallback | None,
    ) -> None:
        try:
            owner = color_bar_owner(entries)
            traces: list[Trace] = []
            for idx, entry in enumerate(entries):
                traces.extend(self._synthesize(entry, entry.points, idx, owner))
            stats = self._aggregate(entries)
        except Exception as exc:  # noqa: BLE001
            self._fail(token, exc)
            return
        self._finish(token, tuple(traces), stats, on_complete)

    async def _run_chunked(
        self,
        token: int,
        entries: tuple[Series, ...],
        opts: ProgressiveOptions,
        on_progress: ProgressCallback | None,
        on_complete: CompleteCallback | None,
    ) -> None:
        total = sum(len(entry.points) for entry in entries)
        try:
            owner = color_bar_owner(entries)
            completed: list[Trace] = []
            loaded = 0
            for idx, start, stop in plan_chunks(entries, opts.chunk_size):
                entry = entries[idx]
                phase = f"Loading {entry.name}..."
                loaded += stop - start
                # Each chunk extends the series' loaded prefix.
                current = self._synthesize(entry, entry.points[:stop], idx, owner)
                if not self._is_current(token):
                    return
                percentage = loaded / total * 100.0
                self._traces = tuple(completed) + tuple(current)
                self._progress = ChunkProgress(phase=phase, loaded_points=loaded, total_points=total, percentage=percentage)
                self._emit(token)
                if on_progress is not None:
                    on_progress(percentage, phase, loaded)
                await self._sleep(opts.inter_chunk_delay_s)
                if not self._is_current(token):
                    return
                if stop == len(entry.points):
                    completed.extend(current)
            stats = self._aggregate(entries)
        except Exception as exc:  # noqa: BLE001
            self._fail(token, exc)
            return
        if not self._is_current(token):
            return
        self._finish(token, tuple(completed), stats, on_complete)

    def _synthesize(self, entry: Series, points: Sequence[Point], idx: int, owner: int | None) -> list[Trace]:
        return self._synthesizer.synthesize(entry, points, series_index=idx, show_color_bar=(idx == owner))

    def _is_current(self, token: int) -> bool:
        if token == self._token:
            return True
        LOGGER.debug("load %d superseded by %d; discarding its results", token, self._token)
        return False

    def _finish(
        self,
        token: int,
        traces: tuple[Trace, ...],
        stats: StatisticsSnapshot,
        on_complete: CompleteCallback | None,
    ) -> None:
        total = stats.total_points
        self._state = next_state(self._state, "complete")
        self._traces = traces
        self._statistics = stats
        self._progress = ChunkProgress(
            phase=f"Complete ({total:,} points)",
            loaded_points=total,
            total_points=total,
            percentage=100.0,
        )
        LOGGER.debug("load %d complete: traces=%d points=%d", token, len(traces), total)
        self._emit(token)
        if on_complete is not None:
            on_complete(total, stats)

    def _fail(self, token: int, exc: Exception) -> None:
        if not self._is_current(token):
            return
        LOGGER.exception("progressive load %d failed: %s", token, exc)
        self._last_error = exc
        self._state = next_state(self._state, "fail")
        # Previously published traces stay in place.
        self._progress = replace(self._progress, phase=f"Error: {exc}")
        self._emit(token)

    def _emit(self, token: int) -> None:
        if not self._listeners:
            return
        snapshot = LoadSnapshot(
            token=token,
            state=self._state,
            progress=self._progress,
            traces=self._traces,
            statistics=self._statistics,
        )
        for listener in list(self._listeners):
            listener(snapshot)
