"""Worker-pool scheduler that throttles calls to rate limited APIs."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable


@dataclass(slots=True)
class _Job:
    func: Callable[..., Awaitable[Any]]
    args: tuple[Any, ...]
    kwargs: dict[str, Any]
    future: asyncio.Future[Any]


class RateLimiter:
    """Runs scheduled coroutines with bounded concurrency and start spacing.

    Jobs are queued FIFO without a depth limit. ``max_concurrent`` worker
    tasks drain the queue, and each worker waits until ``min_interval``
    seconds have passed since the previous job started before starting its
    own, so starts are spaced globally rather than per worker.
    """

    def __init__(
        self,
        *,
        max_concurrent: int = 2,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        if min_interval < 0:
            raise ValueError("min_interval cannot be negative")
        self._max_concurrent = max_concurrent
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._queue: asyncio.Queue[_Job] | None = None
        self._gate: asyncio.Lock | None = None
        self._workers: list[asyncio.Task[None]] = []
        self._last_start: float | None = None
        self._running = 0
        self._started_total = 0
        self._closed = False

    @property
    def pending(self) -> int:
        """Number of queued jobs that have not started yet."""

        return self._queue.qsize() if self._queue is not None else 0

    @property
    def running(self) -> int:
        return self._running

    @property
    def started_total(self) -> int:
        return self._started_total

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Spawn the worker tasks. Must be called from a running event loop."""

        if self._closed:
            raise RuntimeError("RateLimiter has been closed")
        if self._workers:
            return
        if self._queue is None:
            self._queue = asyncio.Queue()
            self._gate = asyncio.Lock()
        self._workers = [
            asyncio.create_task(self._worker(index), name=f"rate-limiter-{index}")
            for index in range(self._max_concurrent)
        ]

    def schedule(
        self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any
    ) -> asyncio.Future[Any]:
        """Queue ``func(*args, **kwargs)`` and return a future for its result."""

        self.start()
        assert self._queue is not None
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._queue.put_nowait(_Job(func, args, kwargs, future))
        return future

    async def join(self) -> None:
        """Wait until every queued job has finished."""

        if self._queue is not None:
            await self._queue.join()

    async def close(self) -> None:
        """Stop the workers and cancel anything still queued."""

        self._closed = True
        workers, self._workers = self._workers, []
        for worker in workers:
            worker.cancel()
        if workers:
            await asyncio.gather(*workers, return_exceptions=True)
        if self._queue is None:
            return
        while True:
            try:
                job = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            job.future.cancel()
            self._queue.task_done()

    async def __aenter__(self) -> "RateLimiter":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                await self.join()
        finally:
            await self.close()

    async def _wait_for_slot(self) -> None:
        assert self._gate is not None
        async with self._gate:
            if self._last_start is not None:
                while True:
                    remaining = self._last_start + self._min_interval - self._clock()
                    if remaining <= 0:
                        break
                    await self._sleep(remaining)
            self._last_start = self._clock()

    async def _worker(self, index: int) -> None:
        assert self._queue is not None
        while True:
            job = await self._queue.get()
            try:
                if job.future.cancelled():
                    continue
                await self._wait_for_slot()
                await self._run(job)
            except asyncio.CancelledError:
                job.future.cancel()
                raise
            finally:
                self._queue.task_done()

    async def _run(self, job: _Job) -> None:
        self._running += 1
        self._started_total += 1
        try:
            result = await job.func(*job.args, **job.kwargs)
        except Exception as exc:
            if not job.future.cancelled():
                job.future.set_exception(exc)
        else:
            if not job.future.cancelled():
                job.future.set_result(result)
        finally:
            self._running -= 1
