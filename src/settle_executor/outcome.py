"""Settle outcomes and the name-keyed result mapping."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal, TYPE_CHECKING

if TYPE_CHECKING:
    from .descriptor import MethodDescriptor

SettleStatus = Literal["fulfilled", "rejected"]


@dataclass(frozen=True, slots=True)
class Fulfilled:
    """A descriptor whose callable produced a value."""

    value: Any

    @property
    def status(self) -> SettleStatus:
        return "fulfilled"

    @property
    def is_fulfilled(self) -> bool:
        return True

    @property
    def is_rejected(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "value": self.value}


@dataclass(frozen=True, slots=True)
class Rejected:
    """A descriptor that failed validation or whose callable raised."""

    reason: BaseException

    @property
    def status(self) -> SettleStatus:
        return "rejected"

    @property
    def is_fulfilled(self) -> bool:
        return False

    @property
    def is_rejected(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "reason": self.reason}


SettleOutcome = Fulfilled | Rejected
ResultMapping = dict[str, SettleOutcome]


def remap_results(
    descriptors: Sequence[MethodDescriptor],
    outcomes: Sequence[SettleOutcome],
) -> ResultMapping:
    """Key each outcome by the name of the descriptor at the same index."""

    if len(descriptors) != len(outcomes):
        msg = (
            f"outcome count {len(outcomes)} does not match "
            f"descriptor count {len(descriptors)}"
        )
        raise ValueError(msg)
    mapping: ResultMapping = {}
    for descriptor, outcome in zip(descriptors, outcomes, strict=True):
        mapping[descriptor.name] = outcome
    return mapping


def summarize(outcomes: Sequence[SettleOutcome]) -> dict[str, int]:
    fulfilled = sum(1 for outcome in outcomes if outcome.is_fulfilled)
    return {
        "total": len(outcomes),
        "fulfilled": fulfilled,
        "rejected": len(outcomes) - fulfilled,
    }


__all__ = [
    "Fulfilled",
    "Rejected",
    "ResultMapping",
    "SettleOutcome",
    "SettleStatus",
    "remap_results",
    "summarize",
]
