"""Async settle-all and race helpers shared by the executor."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
import inspect
import logging
from typing import Any, cast, TypeVar

from .outcome import Fulfilled, Rejected, SettleOutcome

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)

# A zero-argument callable returning either a value or an awaitable of it.
Worker = Callable[[], Awaitable[T] | T]
SettledCallback = Callable[[int, SettleOutcome], None]


async def invoke_worker(worker: Worker[T]) -> T:
    """Call ``worker`` and await its result when it is awaitable."""
    result = worker()
    if inspect.isawaitable(result):
        return await cast(Awaitable[T], result)
    return cast(T, result)


def _is_outer_cancellation() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


async def _settle(worker: Worker[Any]) -> SettleOutcome:
    try:
        value = await invoke_worker(worker)
    except asyncio.CancelledError as exc:
        # Cancellation raised by the callable itself is its own failure.
        if _is_outer_cancellation():
            raise
        return Rejected(exc)
    except Exception as exc:  # noqa: BLE001
        return Rejected(exc)
    return Fulfilled(value)


def _discard_result(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        LOGGER.debug("discarded race loser failure: %r", exc)


async def settle_all(
    workers: Sequence[Worker[Any]],
    *,
    on_settled: SettledCallback | None = None,
) -> list[SettleOutcome]:
    """Run every worker concurrently and collect one outcome per worker.

    A failing worker never interrupts the others; outcomes are returned in
    worker order regardless of completion order.
    """
    if not workers:
        return []

    def _recorder(idx: int) -> Callable[[asyncio.Task[SettleOutcome]], None]:
        def _record(task: asyncio.Task[SettleOutcome]) -> None:
            if on_settled is not None and not task.cancelled():
                on_settled(idx, task.result())

        return _record

    tasks: list[asyncio.Task[SettleOutcome]] = []
    for idx, worker in enumerate(workers):
        task = asyncio.create_task(_settle(worker))
        task.add_done_callback(_recorder(idx))
        tasks.append(task)
    try:
        outcomes = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return list(outcomes)


async def race_first(workers: Sequence[Worker[T]]) -> T:
    """Return (or raise) the outcome of whichever worker settles first.

    Success and failure both count as settling. When several workers settle
    in the same loop iteration the lowest index wins. Losing workers are left
    running and their outcomes are discarded.
    """
    if not workers:
        raise ValueError("workers must not be empty")
    tasks = [asyncio.create_task(invoke_worker(worker)) for worker in workers]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise
    winner = next(task for task in tasks if task in done)
    for task in tasks:
        if task is not winner:
            task.add_done_callback(_discard_result)
    return winner.result()


__all__ = [
    "SettledCallback",
    "Worker",
    "invoke_worker",
    "race_first",
    "settle_all",
]
