"""Normalized exception hierarchy for the settle executor."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerates descriptor-scoped failure kinds."""

    UNFLAGGED_ARRAY_METHOD = "unflagged_array_method"
    INVALID_RACE_METHODS = "invalid_race_methods"
    INVALID_RACE_ARGS = "invalid_race_args"
    INSUFFICIENT_RACE_METHODS = "insufficient_race_methods"
    CALLABLE_FAILURE = "callable_failure"


class ExecutorError(Exception):
    """Base class for executor-originated errors."""


class ConfigError(ExecutorError):
    """Raised when execution options are invalid."""


class DescriptorError(ExecutorError):
    """Raised when a method descriptor cannot be executed as declared."""

    kind: ErrorKind | None = None

    def __init__(
        self,
        name: str,
        detail: str,
        *,
        kind: ErrorKind | None = None,
    ) -> None:
        self.name = name
        self.detail = detail
        if kind is not None:
            self.kind = kind
        super().__init__(f"{name}: {detail}")

    def __str__(self) -> str:
        return f"{self.name}: {self.detail}"


class UnflaggedArrayMethodError(DescriptorError):
    """Raised when several callables are given without race mode."""

    kind = ErrorKind.UNFLAGGED_ARRAY_METHOD


class InvalidRaceMethodsError(DescriptorError):
    """Raised when race mode is flagged on a single callable."""

    kind = ErrorKind.INVALID_RACE_METHODS


class InvalidRaceArgsError(DescriptorError):
    """Raised when race mode args are not a sequence of argument sets."""

    kind = ErrorKind.INVALID_RACE_ARGS


class InsufficientRaceMethodsError(DescriptorError):
    """Raised when race mode holds fewer than two callables."""

    kind = ErrorKind.INSUFFICIENT_RACE_METHODS


def error_kind(error: BaseException | None) -> ErrorKind | None:
    if error is None:
        return None
    if isinstance(error, DescriptorError):
        return error.kind
    return ErrorKind.CALLABLE_FAILURE


__all__ = [
    "ConfigError",
    "DescriptorError",
    "ErrorKind",
    "ExecutorError",
    "InsufficientRaceMethodsError",
    "InvalidRaceArgsError",
    "InvalidRaceMethodsError",
    "UnflaggedArrayMethodError",
    "error_kind",
]
