"""
Spindle - async control-flow helpers.

- spindle.core: errors, tagged results, settings, logging
- spindle.execution: try_it, defer, parallel, all_, retry
"""

__version__ = "0.1.0"

from spindle.core.errors import AggregateError, InvalidArgumentError, SpindleError
from spindle.execution import (
    Abort,
    RetryOptions,
    all_,
    defer,
    guard,
    map_async,
    parallel,
    reduce_async,
    retry,
    sleep,
    try_it,
    with_retry,
)

__all__ = [
    "__version__",
    "AggregateError",
    "InvalidArgumentError",
    "SpindleError",
    "Abort",
    "RetryOptions",
    "all_",
    "defer",
    "guard",
    "map_async",
    "parallel",
    "reduce_async",
    "retry",
    "sleep",
    "try_it",
    "with_retry",
]
