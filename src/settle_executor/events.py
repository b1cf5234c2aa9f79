"""Event emission helpers for descriptor and execution metrics."""
from __future__ import annotations

from collections.abc import Sequence

from .errors import error_kind
from .observability import EventLogger
from .outcome import Rejected, SettleOutcome, summarize


def log_descriptor_settled(
    event_logger: EventLogger | None,
    *,
    name: str,
    index: int,
    mode: str,
    outcome: SettleOutcome,
    latency_ms: int | None,
) -> None:
    if event_logger is None:
        return
    error = outcome.reason if isinstance(outcome, Rejected) else None
    kind = error_kind(error)
    event_logger.emit(
        "descriptor_settled",
        {
            "name": name,
            "index": index,
            "mode": mode,
            "status": outcome.status,
            "latency_ms": latency_ms,
            "error_type": type(error).__name__ if error is not None else None,
            "error_kind": kind.value if kind is not None else None,
            "error_message": str(error) if error is not None else None,
        },
    )


def log_execution_metric(
    event_logger: EventLogger | None,
    *,
    outcomes: Sequence[SettleOutcome],
    latency_ms: int,
) -> None:
    if event_logger is None:
        return
    record: dict[str, int] = summarize(outcomes)
    record["latency_ms"] = latency_ms
    event_logger.emit("execution_metric", record)


__all__ = ["log_descriptor_settled", "log_execution_metric"]
