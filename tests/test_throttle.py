"""Tests for the rate-limited FIFO dispatcher."""

import asyncio
import time

import pytest

from moviedb.throttle import Throttle

# asyncio timers may fire a hair early relative to time.monotonic().
TOLERANCE = 0.01


@pytest.mark.asyncio
async def test_units_start_in_order_with_spacing() -> None:
    """Starts follow submission order and are at least one interval apart."""
    throttle = Throttle(requests_per_second=10)
    starts: list[tuple[int, float]] = []

    def unit(index: int, latency: float):  # noqa: ANN202
        async def run() -> int:
            starts.append((index, time.monotonic()))
            await asyncio.sleep(latency)
            return index

        return run

    # Later units finish first; start order must not care.
    latencies = [0.3, 0.2, 0.1, 0.0, 0.0]
    futures = [throttle.submit(unit(i, lat)) for i, lat in enumerate(latencies)]
    results = await asyncio.gather(*futures)

    assert results == [0, 1, 2, 3, 4]
    assert [index for index, _ in starts] == [0, 1, 2, 3, 4]
    gaps = [b - a for (_, a), (_, b) in zip(starts, starts[1:])]
    assert all(gap >= throttle.interval - TOLERANCE for gap in gaps)


@pytest.mark.asyncio
async def test_completion_order_not_gated() -> None:
    """A slow unit does not block units queued behind it."""
    throttle = Throttle(requests_per_second=100)
    finished: list[str] = []

    async def slow() -> None:
        await asyncio.sleep(0.2)
        finished.append("slow")

    async def fast() -> None:
        finished.append("fast")

    await asyncio.gather(throttle.submit(slow), throttle.submit(fast))
    assert finished == ["fast", "slow"]


@pytest.mark.asyncio
async def test_failing_unit_does_not_stop_queue() -> None:
    """An exception fails only its own future."""
    throttle = Throttle(requests_per_second=100)

    async def boom() -> None:
        raise RuntimeError("boom")

    async def ok() -> str:
        return "ok"

    failed = throttle.submit(boom)
    succeeded = throttle.submit(ok)

    with pytest.raises(RuntimeError, match="boom"):
        await failed
    assert await succeeded == "ok"


@pytest.mark.asyncio
async def test_queue_is_unbounded_and_drains() -> None:
    """Many queued units are all eventually run."""
    throttle = Throttle(requests_per_second=1000)

    async def value(n: int) -> int:
        return n

    futures = [throttle.submit(lambda n=n: value(n)) for n in range(50)]
    assert throttle.pending == 50
    assert await asyncio.gather(*futures) == list(range(50))
    assert throttle.pending == 0


@pytest.mark.asyncio
async def test_cancelled_unit_is_skipped() -> None:
    """A unit whose future was cancelled before starting never runs."""
    throttle = Throttle(requests_per_second=20)
    ran: list[int] = []

    async def record(n: int) -> None:
        ran.append(n)

    first = throttle.submit(lambda: record(1))
    second = throttle.submit(lambda: record(2))
    second.cancel()
    await first
    await asyncio.sleep(throttle.interval * 3)
    assert ran == [1]


@pytest.mark.asyncio
async def test_unit_cancelled_while_waiting_for_slot_is_skipped() -> None:
    """Cancelling during the throttle delay still prevents the unit from running."""
    throttle = Throttle(requests_per_second=5)
    ran: list[int] = []

    async def record(n: int) -> None:
        ran.append(n)

    await throttle.submit(lambda: record(1))
    waiting = throttle.submit(lambda: record(2))
    await asyncio.sleep(0.05)
    assert throttle.pending == 0
    waiting.cancel()
    await asyncio.sleep(throttle.interval * 2)
    assert ran == [1]


def test_rejects_non_positive_rate() -> None:
    with pytest.raises(ValueError):
        Throttle(requests_per_second=0)


@pytest.mark.asyncio
async def test_instances_do_not_share_budget() -> None:
    """Two throttles start their first units without waiting on each other."""
    a = Throttle(requests_per_second=1)
    b = Throttle(requests_per_second=1)

    async def noop() -> None:
        return None

    started = time.monotonic()
    await asyncio.gather(a.submit(noop), b.submit(noop))
    assert time.monotonic() - started < 0.5
