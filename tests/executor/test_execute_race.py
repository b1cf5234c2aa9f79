from __future__ import annotations

import asyncio
import gc
from typing import Any

import pytest

from settle_executor import (
    ErrorKind,
    execute,
    Fulfilled,
    InsufficientRaceMethodsError,
    InvalidRaceArgsError,
    InvalidRaceMethodsError,
    MethodDescriptor,
    Rejected,
    UnflaggedArrayMethodError,
)
from tests.executor_helpers import CallRecorder, delayed, delayed_failure

# --- winner selection ---


@pytest.mark.asyncio
async def test_race_takes_fastest_value() -> None:
    slow = delayed("slow-value", 0.05)
    fast = delayed("fast-value", 0.0)

    results = await execute(
        [{"name": "r", "method": [slow, fast], "args": [[], []], "options": {"isRace": True}}]
    )

    assert results == {"r": Fulfilled("fast-value")}


@pytest.mark.asyncio
async def test_race_failure_wins_when_it_settles_first() -> None:
    error = TimeoutError("fast failure")
    fast_failure = delayed_failure(error, 0.0)
    slow_success = delayed("slow-ok", 0.05)

    results = await execute(
        [
            MethodDescriptor(
                name="r",
                method=[slow_success, fast_failure],
                args=[[], []],
                options={"isRace": True},
            )
        ]
    )

    outcome = results["r"]
    assert isinstance(outcome, Rejected)
    assert outcome.reason is error


@pytest.mark.asyncio
async def test_race_args_are_paired_by_index() -> None:
    first = CallRecorder(result="first")
    second = CallRecorder(result="second")
    payload = {"args": "test set 2"}

    results = await execute(
        [
            MethodDescriptor(
                name="paired",
                method=[first, second],
                args=[[1, 2], payload],
                options={"isRace": True},
            )
        ]
    )

    assert first.calls == [(1, 2)]
    assert second.calls == [(payload,)]
    # Both settle in the same loop iteration; the lower index wins.
    assert results["paired"] == Fulfilled("first")


@pytest.mark.asyncio
async def test_race_missing_arg_set_passes_none() -> None:
    first = CallRecorder(result=None)
    second = CallRecorder(result=None)

    await execute(
        [
            MethodDescriptor(
                name="short-args",
                method=[first, second],
                args=[["only"]],
                options={"isRace": True},
            )
        ]
    )

    assert first.calls == [("only",)]
    assert second.calls == [(None,)]


@pytest.mark.asyncio
async def test_race_loser_failure_is_discarded_quietly() -> None:
    loop = asyncio.get_running_loop()
    reported: list[dict[str, Any]] = []
    loop.set_exception_handler(lambda _loop, context: reported.append(context))
    loser_done = asyncio.Event()

    async def _slow_failure() -> None:
        await asyncio.sleep(0.01)
        loser_done.set()
        raise RuntimeError("loser")

    try:
        results = await execute(
            [
                MethodDescriptor(
                    name="r",
                    method=[delayed("winner", 0.0), _slow_failure],
                    args=[[], []],
                    options={"isRace": True},
                )
            ]
        )
        await asyncio.wait_for(loser_done.wait(), timeout=1)
        await asyncio.sleep(0.01)
        gc.collect()
    finally:
        loop.set_exception_handler(None)

    assert results == {"r": Fulfilled("winner")}
    assert reported == []


@pytest.mark.asyncio
async def test_race_and_single_descriptors_settle_together() -> None:
    results = await execute(
        [
            MethodDescriptor(name="single", method=delayed("one", 0.0), args={}),
            MethodDescriptor(
                name="race",
                method=[delayed("slow", 0.03), delayed("fast", 0.01)],
                args=[[], []],
                options={"isRace": True},
            ),
        ]
    )

    assert results == {"single": Fulfilled("one"), "race": Fulfilled("fast")}


# --- validation ---


@pytest.mark.asyncio
async def test_race_requires_method_list() -> None:
    target = CallRecorder()

    results = await execute(
        [MethodDescriptor(name="r", method=target, args=[[]], options={"isRace": True})]
    )

    outcome = results["r"]
    assert isinstance(outcome, Rejected)
    assert isinstance(outcome.reason, InvalidRaceMethodsError)
    assert str(outcome.reason) == "r: methods must be in an array when in race condition"
    assert outcome.reason.kind is ErrorKind.INVALID_RACE_METHODS
    assert target.calls == []


@pytest.mark.asyncio
async def test_race_requires_arg_list() -> None:
    first = CallRecorder()
    second = CallRecorder()

    results = await execute(
        [
            MethodDescriptor(
                name="r", method=[first, second], args={}, options={"isRace": True}
            )
        ]
    )

    outcome = results["r"]
    assert isinstance(outcome, Rejected)
    assert isinstance(outcome.reason, InvalidRaceArgsError)
    assert str(outcome.reason) == "r: args must be an array"
    assert first.calls == second.calls == []


@pytest.mark.asyncio
async def test_race_requires_two_methods() -> None:
    only = CallRecorder()

    results = await execute(
        [MethodDescriptor(name="r", method=[only], args=[[]], options={"isRace": True})]
    )

    outcome = results["r"]
    assert isinstance(outcome, Rejected)
    assert isinstance(outcome.reason, InsufficientRaceMethodsError)
    assert str(outcome.reason) == (
        "r: there must be at least two methods to fulfill race condition"
    )
    assert only.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("options", [{}, {"isRace": False}, None])
async def test_method_list_without_race_flag_is_rejected(
    options: dict[str, Any] | None,
) -> None:
    first = CallRecorder()
    second = CallRecorder()

    results = await execute(
        [{"name": "test4", "method": [first, second], "args": [[], []], "options": options}]
    )

    outcome = results["test4"]
    assert isinstance(outcome, Rejected)
    assert isinstance(outcome.reason, UnflaggedArrayMethodError)
    assert str(outcome.reason) == "test4: is an array but not flagged as a race condition"
    assert first.calls == second.calls == []


@pytest.mark.asyncio
async def test_invalid_descriptor_does_not_block_siblings() -> None:
    results = await execute(
        [
            MethodDescriptor(name="bad", method=[CallRecorder(), CallRecorder()], args=[]),
            MethodDescriptor(name="good", method=delayed("fine", 0.0), args={}),
        ]
    )

    assert isinstance(results["bad"], Rejected)
    assert results["good"] == Fulfilled("fine")
