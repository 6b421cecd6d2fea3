"""
Spindle core: errors, tagged results, settings and logging.

These modules have no knowledge of the combinators in
:mod:`spindle.execution`; the dependency only runs the other way.
"""

from spindle.core.errors import (
    AggregateError,
    ConfigError,
    ErrorCategory,
    InvalidArgumentError,
    SpindleError,
    categorize_error,
    is_retryable,
)
from spindle.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from spindle.core.result import Err, Ok, Result, from_outcome, partition_results
from spindle.core.settings import SpindleSettings, get_settings

__all__ = [
    # errors
    "AggregateError",
    "ConfigError",
    "ErrorCategory",
    "InvalidArgumentError",
    "SpindleError",
    "categorize_error",
    "is_retryable",
    # logging
    "LogContext",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
    # result
    "Err",
    "Ok",
    "Result",
    "from_outcome",
    "partition_results",
    # settings
    "SpindleSettings",
    "get_settings",
]
