"""Method descriptor types submitted to the executor."""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import DescriptorError

_SEQUENCE_TYPES = (list, tuple)


@dataclass(frozen=True, slots=True)
class SingleCallable:
    """One callable invoked directly."""

    fn: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class CallableList:
    """Several callables; only valid in race mode."""

    fns: tuple[Callable[..., Any], ...]

    def __len__(self) -> int:
        return len(self.fns)


@dataclass(frozen=True, slots=True)
class SingleArgs:
    """A value passed to the callable as its only argument."""

    value: Any = None


@dataclass(frozen=True, slots=True)
class ArgList:
    """Positional argument values, spread into the callable."""

    values: tuple[Any, ...] = ()

    def __len__(self) -> int:
        return len(self.values)

    def get(self, index: int) -> Any:
        if 0 <= index < len(self.values):
            return self.values[index]
        return None


MethodSpec = SingleCallable | CallableList
ArgsSpec = SingleArgs | ArgList


def coerce_method(method: Any) -> MethodSpec:
    if isinstance(method, (SingleCallable, CallableList)):
        return method
    if isinstance(method, _SEQUENCE_TYPES):
        return CallableList(tuple(method))
    return SingleCallable(method)


def coerce_args(args: Any) -> ArgsSpec:
    if isinstance(args, (SingleArgs, ArgList)):
        return args
    if isinstance(args, _SEQUENCE_TYPES):
        return ArgList(tuple(args))
    return SingleArgs(args)


@dataclass(frozen=True, slots=True)
class MethodOptions:
    """Per-descriptor execution flags."""

    is_race: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> MethodOptions:
        if not options:
            return cls()
        # camelCase wins when both spellings are present.
        if "isRace" in options:
            raw = options["isRace"]
        else:
            raw = options.get("is_race", False)
        return cls(is_race=bool(raw))


@dataclass(frozen=True, slots=True)
class MethodDescriptor:
    """Named unit of work: callable(s), arguments and options.

    ``method`` and ``args`` accept raw values and are normalised into their
    tagged variants on construction. Shape errors (an unflagged list of
    callables, a race with one callable) are legal here; they are reported
    per descriptor when the batch executes.
    """

    name: str
    method: MethodSpec
    args: ArgsSpec = field(default_factory=SingleArgs)
    options: MethodOptions = field(default_factory=MethodOptions)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise DescriptorError(repr(self.name), "name must be a non-empty string")
        object.__setattr__(self, "method", coerce_method(self.method))
        object.__setattr__(self, "args", coerce_args(self.args))
        if self.options is None or isinstance(self.options, Mapping):
            object.__setattr__(self, "options", MethodOptions.from_mapping(self.options))

    @property
    def is_race(self) -> bool:
        return self.options.is_race

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> MethodDescriptor:
        if "name" not in payload:
            raise DescriptorError("<unnamed>", "descriptor requires a name")
        if "method" not in payload:
            raise DescriptorError(str(payload["name"]), "descriptor requires a method")
        options = payload.get("options")
        return cls(
            name=payload["name"],
            method=payload["method"],
            args=payload.get("args"),
            options=MethodOptions.from_mapping(options),
        )


DescriptorLike = MethodDescriptor | Mapping[str, Any]


def to_descriptor(item: DescriptorLike) -> MethodDescriptor:
    if isinstance(item, MethodDescriptor):
        return item
    if isinstance(item, Mapping):
        return MethodDescriptor.from_mapping(item)
    raise TypeError(f"unsupported descriptor type: {type(item).__name__}")


__all__ = [
    "ArgList",
    "ArgsSpec",
    "CallableList",
    "DescriptorLike",
    "MethodDescriptor",
    "MethodOptions",
    "MethodSpec",
    "SingleArgs",
    "SingleCallable",
    "coerce_args",
    "coerce_method",
    "to_descriptor",
]
