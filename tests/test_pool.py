"""Tests for the bounded task pool."""

from __future__ import annotations

import asyncio

import pytest

from enricher import pool
from enricher.pool import (
    Fulfilled,
    PoolAggregationError,
    Rejected,
    fulfilled_values,
    run_pool,
)


class OverlapTracker:
    """Builds tasks that record how many of them are running at once."""

    def __init__(self) -> None:
        self.active = 0
        self.peak = 0
        self.started: list[int] = []

    def task(self, index: int, delay: float = 0.0):
        async def run() -> int:
            self.started.append(index)
            self.active += 1
            self.peak = max(self.peak, self.active)
            try:
                # Later tasks finish first so completion order differs from input order.
                await asyncio.sleep(delay)
                return index * 10
            finally:
                self.active -= 1

        return run


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(("count", "concurrency"), [(7, 1), (7, 3), (3, 8), (10, 10)])
async def test_results_match_input_positions(count: int, concurrency: int) -> None:
    """Every slot holds the outcome of the task at the same index."""

    tracker = OverlapTracker()
    tasks = [tracker.task(index, delay=0.001 * (count - index)) for index in range(count)]

    results = await run_pool(tasks, concurrency)

    assert len(results) == count
    assert results == [Fulfilled(index * 10) for index in range(count)]
    assert tracker.peak <= min(concurrency, count)
    assert sorted(tracker.started) == list(range(count))


@pytest.mark.anyio("asyncio")
async def test_concurrency_reaches_but_never_exceeds_the_limit() -> None:
    tracker = OverlapTracker()
    tasks = [tracker.task(index, delay=0.01) for index in range(9)]

    await run_pool(tasks, 3)

    assert tracker.peak == 3


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize("concurrency", [None, 0, -1])
async def test_non_positive_concurrency_starts_everything(concurrency: int | None) -> None:
    tracker = OverlapTracker()
    tasks = [tracker.task(index, delay=0.01) for index in range(6)]

    results = await run_pool(tasks, concurrency)

    assert tracker.peak == 6
    assert fulfilled_values(results) == [0, 10, 20, 30, 40, 50]


@pytest.mark.anyio("asyncio")
async def test_failures_only_affect_their_own_slot() -> None:
    error = ValueError("boom")
    executed: list[int] = []

    def make(index: int):
        async def run() -> int:
            executed.append(index)
            await asyncio.sleep(0)
            if index % 2:
                raise error
            return index

        return run

    results = await run_pool([make(index) for index in range(5)], 2)

    assert sorted(executed) == [0, 1, 2, 3, 4]
    assert [result.status for result in results] == [
        "fulfilled",
        "rejected",
        "fulfilled",
        "rejected",
        "fulfilled",
    ]
    assert isinstance(results[1], Rejected)
    assert results[1].reason is error
    assert fulfilled_values(results) == [0, 2, 4]


@pytest.mark.anyio("asyncio")
async def test_task_raising_before_its_first_await_is_rejected() -> None:
    def broken():
        raise RuntimeError("not even a coroutine")

    async def fine() -> str:
        return "ok"

    results = await run_pool([broken, fine], 1)

    assert isinstance(results[0], Rejected)
    assert results[1] == Fulfilled("ok")


@pytest.mark.anyio("asyncio")
async def test_empty_task_list() -> None:
    assert await run_pool([], 4) == []


@pytest.mark.anyio("asyncio")
async def test_aggregation_failure_returns_partial_results(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    """An error in the pool itself is logged and unsettled slots are filled."""

    calls = 0

    async def broken_settle(task):
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("recording failed")
        return Fulfilled(await task())

    monkeypatch.setattr(pool, "settle", broken_settle)

    executed: list[int] = []

    def make(index: int):
        async def run() -> int:
            await asyncio.sleep(0.01)
            executed.append(index)
            return index

        return run

    with caplog.at_level("ERROR", logger="enricher.pool"):
        results = await run_pool([make(index) for index in range(6)], 2)
    executed_at_return = list(executed)
    await asyncio.sleep(0.05)

    assert len(results) == 6
    assert isinstance(results[0], Rejected)
    assert isinstance(results[0].reason, PoolAggregationError)
    assert results[1:] == [Fulfilled(index) for index in range(1, 6)]
    assert executed_at_return == [1, 2, 3, 4, 5]
    assert executed == executed_at_return
    assert "aggregation failed" in caplog.text
