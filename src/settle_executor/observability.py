"""Structured event sinks for executor diagnostics."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Protocol

PathLike = str | Path

LOGGER = logging.getLogger(__name__)


class EventLogger(Protocol):
    """Protocol for structured event loggers."""

    def emit(self, event_type: str, record: Mapping[str, Any]) -> None:
        """Persist ``record`` for ``event_type``."""


def _dumps(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, default=repr)


class JsonlLogger:
    """Append structured events to a JSONL file with basic locking."""

    def __init__(self, path: PathLike) -> None:
        self._path = Path(path)
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, event_type: str, record: Mapping[str, Any]) -> None:
        payload = dict(record)
        payload.setdefault("event", event_type)

        target = self._path
        parent = target.parent
        if parent != Path(""):
            parent.mkdir(parents=True, exist_ok=True)

        with self._lock:
            with target.open("a", encoding="utf-8") as handle:
                handle.write(_dumps(payload) + "\n")


class CompositeLogger:
    """Fan out events to multiple loggers while isolating failures."""

    def __init__(self, loggers: Iterable[EventLogger] | None = None) -> None:
        self._loggers: tuple[EventLogger, ...] = tuple(loggers or ())

    def emit(self, event_type: str, record: Mapping[str, Any]) -> None:
        for logger in self._loggers:
            try:
                logger.emit(event_type, record)
            except Exception:  # noqa: BLE001
                LOGGER.exception("event logger %r failed on %s", logger, event_type)


def resolve_event_logger(
    logger: EventLogger | None,
    metrics_path: PathLike | None,
) -> EventLogger | None:
    """Combine an explicit logger and a JSONL metrics path into one sink."""
    sinks: list[EventLogger] = []
    if logger is not None:
        sinks.append(logger)
    if metrics_path is not None:
        sinks.append(JsonlLogger(metrics_path))
    if not sinks:
        return None
    return CompositeLogger(sinks)


__all__ = [
    "CompositeLogger",
    "EventLogger",
    "JsonlLogger",
    "PathLike",
    "resolve_event_logger",
]
