"""Client-side request throttling.

Throttle caps how often units of work may *start*: consecutive starts are at
least ``1 / requests_per_second`` seconds apart, so no rolling one-second
window sees more than ``requests_per_second`` starts. Units start in
submission order. Completion is not gated, so a slow unit never holds back the
next one.

The queue is unbounded. Under sustained overload it grows without limit;
callers that need backpressure must apply it themselves.
"""

import asyncio
import time
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any, Deque, Optional, Tuple, TypeVar

T = TypeVar("T")

UnitOfWork = Callable[[], Awaitable[Any]]


class Throttle:
    """FIFO dispatcher that rate-limits the start of async units of work.

    One instance per client; instances never share budgets.
    """

    def __init__(
        self,
        requests_per_second: float = 50,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the throttle.

        Args:
            requests_per_second: Maximum number of starts per second.
            clock: Monotonic clock in seconds; injectable for tests.

        Raises:
            ValueError: If requests_per_second is not positive.
        """
        if requests_per_second <= 0:
            raise ValueError(
                f"requests_per_second must be positive, got {requests_per_second}"
            )
        self.requests_per_second = requests_per_second
        self.interval = 1.0 / requests_per_second
        self._clock = clock
        self._queue: Deque[Tuple[UnitOfWork, asyncio.Future[Any]]] = deque()
        self._last_start: Optional[float] = None
        self._worker: Optional[asyncio.Task[None]] = None
        self._running: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of queued units that have not started yet."""
        return len(self._queue)

    def submit(self, unit: Callable[[], Awaitable[T]]) -> "asyncio.Future[T]":
        """Queue *unit* and return a future for its result.

        The unit is enqueued immediately, so the order of submit() calls is the
        order in which units start. If the unit raises, only this future fails.

        Args:
            unit: Zero-argument callable returning an awaitable.

        Returns:
            Future resolving to the unit's result.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[T] = loop.create_future()
        self._queue.append((unit, future))
        if self._worker is None or self._worker.done():
            self._worker = loop.create_task(self._drain())
        return future

    async def _drain(self) -> None:
        while self._queue:
            unit, future = self._queue.popleft()
            if future.done():
                # Caller gave up before the unit started.
                continue
            if self._last_start is not None:
                delay = self._last_start + self.interval - self._clock()
                if delay > 0:
                    await asyncio.sleep(delay)
                    if future.done():
                        # Cancelled while waiting for its slot.
                        continue
            self._last_start = self._clock()
            self._start(unit, future)

    def _start(self, unit: UnitOfWork, future: "asyncio.Future[Any]") -> None:
        try:
            task = asyncio.ensure_future(unit())
        except Exception as exc:
            future.set_exception(exc)
            return
        self._running.add(task)
        task.add_done_callback(lambda done: self._settle(done, future))

    def _settle(self, task: "asyncio.Task[Any]", future: "asyncio.Future[Any]") -> None:
        self._running.discard(task)
        if task.cancelled():
            if not future.done():
                future.cancel()
            return
        exc = task.exception()
        if future.done():
            return
        if exc is not None:
            future.set_exception(exc)
        else:
            future.set_result(task.result())
