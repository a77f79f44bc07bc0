"""Run asynchronous tasks with a bounded number of concurrent workers."""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Sequence, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

Task = Callable[[], Awaitable[T]]


class PoolAggregationError(RuntimeError):
    """Marks a slot whose task never settled because the pool itself failed."""


@dataclass(slots=True, frozen=True)
class Fulfilled(Generic[T]):
    """Outcome of a task that returned a value."""

    value: T

    @property
    def status(self) -> str:
        return "fulfilled"


@dataclass(slots=True, frozen=True)
class Rejected:
    """Outcome of a task that raised."""

    reason: BaseException

    @property
    def status(self) -> str:
        return "rejected"


SettledResult = Union[Fulfilled[T], Rejected]


async def settle(task: Task[T]) -> SettledResult[T]:
    """Run ``task`` and capture its outcome instead of raising."""

    # CancelledError propagates; claimed tasks are never cancelled.
    try:
        return Fulfilled(await task())
    except Exception as exc:
        return Rejected(exc)


async def run_pool(
    tasks: Sequence[Task[T]], concurrency: int | None
) -> list[SettledResult[T]]:
    """Execute ``tasks`` and return their outcomes in input order.

    With a positive ``concurrency`` exactly ``min(concurrency, len(tasks))``
    workers are started. Each worker claims the next unclaimed index, runs that
    task and records the outcome at the same index until every index has been
    claimed. Without a positive ``concurrency`` all tasks start at once.

    A failing task only ever affects its own slot. The returned list always has
    one entry per task.
    """

    total = len(tasks)
    results: list[SettledResult[T] | None] = [None] * total

    if concurrency is None or concurrency <= 0:
        runners: list[Awaitable[Any]] = [
            _record(results, index, task) for index, task in enumerate(tasks)
        ]
    else:
        # next() on itertools.count is a single step, so no two workers can
        # claim the same index.
        claims = itertools.count()

        async def worker() -> None:
            while True:
                index = next(claims)
                if index >= total:
                    return
                await _record(results, index, tasks[index])

        runners = [worker() for _ in range(min(concurrency, total))]

    # Runner failures are returned, not raised, so every remaining worker
    # drains the counter before the pool resolves.
    outcomes = await asyncio.gather(*runners, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, Exception):
            logger.error(
                "Task pool aggregation failed; returning partial results",
                exc_info=outcome,
            )

    return [
        result
        if result is not None
        else Rejected(PoolAggregationError(f"Task {index} did not settle"))
        for index, result in enumerate(results)
    ]


async def _record(
    results: list[SettledResult[T] | None], index: int, task: Task[T]
) -> None:
    results[index] = await settle(task)


def fulfilled_values(results: Sequence[SettledResult[T]]) -> list[T]:
    """Return the values of fulfilled results, keeping their order."""

    return [result.value for result in results if isinstance(result, Fulfilled)]
