"""Configuration objects for a single executor run."""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .observability import EventLogger, PathLike, resolve_event_logger

CustomLogger = Callable[[str], None]

_KEY_ALIASES = {
    "customLogger": "custom_logger",
    "custom_logger": "custom_logger",
    "eventLogger": "event_logger",
    "event_logger": "event_logger",
    "metricsPath": "metrics_path",
    "metrics_path": "metrics_path",
}


@dataclass(frozen=True)
class ExecutionOptions:
    """Batch-level options; every field is optional and defaults to a no-op."""

    custom_logger: CustomLogger | None = None
    event_logger: EventLogger | None = None
    metrics_path: PathLike | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ExecutionOptions:
        values: dict[str, Any] = {}
        for key, value in data.items():
            field_name = _KEY_ALIASES.get(str(key))
            if field_name is None:
                raise ConfigError(f"unknown execution option: {key!r}")
            values[field_name] = value
        custom_logger = values.get("custom_logger")
        if custom_logger is not None and not callable(custom_logger):
            raise ConfigError("customLogger must be callable")
        return cls(**values)

    def resolved_event_logger(self) -> EventLogger | None:
        return resolve_event_logger(self.event_logger, self.metrics_path)


OptionsLike = ExecutionOptions | Mapping[str, Any] | None


def coerce_options(options: OptionsLike) -> ExecutionOptions:
    if options is None:
        return ExecutionOptions()
    if isinstance(options, ExecutionOptions):
        return options
    if isinstance(options, Mapping):
        return ExecutionOptions.from_mapping(options)
    raise ConfigError(f"unsupported options type: {type(options).__name__}")


def load_execution_options(
    path: PathLike,
    *,
    custom_logger: CustomLogger | None = None,
    event_logger: EventLogger | None = None,
) -> ExecutionOptions:
    """Load file-backed options from YAML; callables are passed in directly."""
    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"options file not found: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {config_path}: {exc}") from exc
    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise ConfigError(f"{config_path}: options must be a mapping")
    for key in document:
        if _KEY_ALIASES.get(str(key)) != "metrics_path":
            raise ConfigError(f"{config_path}: unsupported option {key!r}")
    metrics_path = document.get("metrics_path", document.get("metricsPath"))
    if metrics_path is not None:
        metrics_path = (config_path.parent / str(metrics_path)).resolve()
    return ExecutionOptions(
        custom_logger=custom_logger,
        event_logger=event_logger,
        metrics_path=metrics_path,
    )


__all__ = [
    "CustomLogger",
    "ExecutionOptions",
    "OptionsLike",
    "coerce_options",
    "load_execution_options",
]
