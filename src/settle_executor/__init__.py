"""Run named callables concurrently and collect every settled outcome."""
import logging

from .config import (
    ExecutionOptions as ExecutionOptions,
    load_execution_options as load_execution_options,
)
from .descriptor import (
    ArgList as ArgList,
    CallableList as CallableList,
    MethodDescriptor as MethodDescriptor,
    MethodOptions as MethodOptions,
    SingleArgs as SingleArgs,
    SingleCallable as SingleCallable,
)
from .errors import (
    ConfigError as ConfigError,
    DescriptorError as DescriptorError,
    ErrorKind as ErrorKind,
    ExecutorError as ExecutorError,
    InsufficientRaceMethodsError as InsufficientRaceMethodsError,
    InvalidRaceArgsError as InvalidRaceArgsError,
    InvalidRaceMethodsError as InvalidRaceMethodsError,
    UnflaggedArrayMethodError as UnflaggedArrayMethodError,
)
from .executor import (
    execute as execute,
    execute_sync as execute_sync,
    Executor as Executor,
)
from .observability import (
    EventLogger as EventLogger,
    JsonlLogger as JsonlLogger,
)
from .outcome import (
    Fulfilled as Fulfilled,
    Rejected as Rejected,
    ResultMapping as ResultMapping,
    SettleOutcome as SettleOutcome,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "ArgList",
    "CallableList",
    "ConfigError",
    "DescriptorError",
    "ErrorKind",
    "EventLogger",
    "ExecutionOptions",
    "Executor",
    "ExecutorError",
    "Fulfilled",
    "InsufficientRaceMethodsError",
    "InvalidRaceArgsError",
    "InvalidRaceMethodsError",
    "JsonlLogger",
    "MethodDescriptor",
    "MethodOptions",
    "Rejected",
    "ResultMapping",
    "SettleOutcome",
    "SingleArgs",
    "SingleCallable",
    "UnflaggedArrayMethodError",
    "execute",
    "execute_sync",
    "load_execution_options",
]
