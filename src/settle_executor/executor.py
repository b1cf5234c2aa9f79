"""Concurrent settle-all execution of named method descriptors."""
from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import Callable, Sequence
import logging
import time
from typing import Any, cast, NoReturn

from .config import CustomLogger, coerce_options, OptionsLike
from .descriptor import (
    ArgList,
    ArgsSpec,
    CallableList,
    coerce_args,
    DescriptorLike,
    MethodDescriptor,
    SingleCallable,
    to_descriptor,
)
from .errors import (
    DescriptorError,
    InsufficientRaceMethodsError,
    InvalidRaceArgsError,
    InvalidRaceMethodsError,
    UnflaggedArrayMethodError,
)
from .events import log_descriptor_settled, log_execution_metric
from .outcome import remap_results, ResultMapping, SettleOutcome
from .parallel_async import invoke_worker, race_first, settle_all, Worker

LOGGER = logging.getLogger(__name__)

UNFLAGGED_ARRAY_METHOD = "is an array but not flagged as a race condition"
INVALID_RACE_METHODS = "methods must be in an array when in race condition"
INVALID_RACE_ARGS = "args must be an array"
INSUFFICIENT_RACE_METHODS = "there must be at least two methods to fulfill race condition"

MIN_RACE_METHODS = 2


def _notify(custom_logger: CustomLogger | None, message: str) -> None:
    if custom_logger is None:
        return
    try:
        custom_logger(message)
    except Exception:  # noqa: BLE001
        LOGGER.exception("custom logger raised while reporting %r", message)


def _reject(error: DescriptorError, custom_logger: CustomLogger | None) -> NoReturn:
    message = str(error)
    LOGGER.warning("descriptor rejected: %s", message)
    _notify(custom_logger, message)
    raise error


def validate_descriptor(
    descriptor: MethodDescriptor,
    custom_logger: CustomLogger | None = None,
) -> None:
    """Raise a :class:`DescriptorError` when the method/args shape is invalid.

    The custom logger, when given, receives the prefixed message right before
    the error is raised.
    """
    name = descriptor.name
    method = descriptor.method
    if descriptor.is_race:
        if not isinstance(method, CallableList):
            _reject(InvalidRaceMethodsError(name, INVALID_RACE_METHODS), custom_logger)
        if not isinstance(descriptor.args, ArgList):
            _reject(InvalidRaceArgsError(name, INVALID_RACE_ARGS), custom_logger)
        if len(method) < MIN_RACE_METHODS:
            _reject(
                InsufficientRaceMethodsError(name, INSUFFICIENT_RACE_METHODS),
                custom_logger,
            )
        return
    if isinstance(method, CallableList):
        _reject(UnflaggedArrayMethodError(name, UNFLAGGED_ARRAY_METHOD), custom_logger)


def bind_args(fn: Callable[..., Any], args: ArgsSpec) -> Worker[Any]:
    """Bind ``args`` to ``fn``: argument lists are spread, single values are not."""
    if isinstance(args, ArgList):
        values = args.values
        return lambda: fn(*values)
    value = args.value
    return lambda: fn(value)


def race_workers(descriptor: MethodDescriptor) -> list[Worker[Any]]:
    method = cast(CallableList, descriptor.method)
    args = cast(ArgList, descriptor.args)
    # Argument set i belongs to callable i; each set is spread on its own.
    return [bind_args(fn, coerce_args(args.get(index))) for index, fn in enumerate(method.fns)]


def build_worker(
    descriptor: MethodDescriptor,
    custom_logger: CustomLogger | None = None,
) -> Worker[Any]:
    """Return a worker that validates ``descriptor`` and then invokes it."""

    async def _run() -> Any:
        validate_descriptor(descriptor, custom_logger)
        if descriptor.is_race:
            return await race_first(race_workers(descriptor))
        method = cast(SingleCallable, descriptor.method)
        return await invoke_worker(bind_args(method.fn, descriptor.args))

    return _run


def _warn_duplicate_names(descriptors: Sequence[MethodDescriptor]) -> None:
    counts = Counter(descriptor.name for descriptor in descriptors)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        LOGGER.warning(
            "duplicate descriptor names %s; the last outcome for each name is kept",
            duplicates,
        )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


async def execute(
    descriptors: Sequence[DescriptorLike],
    options: OptionsLike = None,
) -> ResultMapping:
    """Run every descriptor concurrently and key the settled outcomes by name.

    Never raises because of a descriptor: validation failures and callable
    failures both come back as ``Rejected`` entries of the mapping.
    """
    resolved = coerce_options(options)
    items = [to_descriptor(item) for item in descriptors]
    _warn_duplicate_names(items)
    event_logger = resolved.resolved_event_logger()
    workers = [build_worker(item, resolved.custom_logger) for item in items]
    started = time.perf_counter()

    def _on_settled(index: int, outcome: SettleOutcome) -> None:
        descriptor = items[index]
        log_descriptor_settled(
            event_logger,
            name=descriptor.name,
            index=index,
            mode="race" if descriptor.is_race else "single",
            outcome=outcome,
            latency_ms=_elapsed_ms(started),
        )

    outcomes = await settle_all(
        workers,
        on_settled=_on_settled if event_logger is not None else None,
    )
    log_execution_metric(event_logger, outcomes=outcomes, latency_ms=_elapsed_ms(started))
    results = remap_results(items, outcomes)
    LOGGER.debug(
        "settled %d descriptors: %s",
        len(items),
        {name: outcome.status for name, outcome in results.items()},
    )
    return results


def execute_sync(
    descriptors: Sequence[DescriptorLike],
    options: OptionsLike = None,
) -> ResultMapping:
    """Blocking wrapper around :func:`execute` for code without a running loop."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(execute(descriptors, options))
    raise RuntimeError(
        "execute_sync() cannot run inside an event loop; await execute() instead"
    )


class Executor:
    """Holds a batch of descriptors that can be executed any number of times."""

    def __init__(self, methods: Sequence[DescriptorLike]) -> None:
        self._methods = tuple(to_descriptor(item) for item in methods)

    @property
    def methods(self) -> tuple[MethodDescriptor, ...]:
        return self._methods

    async def execute(self, options: OptionsLike = None) -> ResultMapping:
        return await execute(self._methods, options)

    def execute_sync(self, options: OptionsLike = None) -> ResultMapping:
        return execute_sync(self._methods, options)


__all__ = [
    "Executor",
    "INSUFFICIENT_RACE_METHODS",
    "INVALID_RACE_ARGS",
    "INVALID_RACE_METHODS",
    "UNFLAGGED_ARRAY_METHOD",
    "bind_args",
    "build_worker",
    "execute",
    "execute_sync",
    "race_workers",
    "validate_descriptor",
]
