"""Spindle Execution: async control-flow combinators.

MODULE MAP (recommended reading order)
──────────────────────────────────────
  1. guards.py     ─ try_it, settle, guard (the result-wrapping layer)
  2. timing.py     ─ sleep (milliseconds)
  3. defer.py      ─ defer (registered cleanups)
  4. parallel.py   ─ parallel (bounded fan-out), map_async, reduce_async
  5. gather.py     ─ all_ (all-settled, list or dict shaped)
  6. retry.py      ─ retry, RetryOptions, Abort, backoff strategies

Failure model
─────────────
``parallel``, ``all_`` and ``defer`` let every sibling settle and then raise
one :class:`~spindle.core.errors.AggregateError`. ``retry`` re-raises the
caller's own error unchanged.
"""

from spindle.execution.defer import Register, defer
from spindle.execution.gather import all_
from spindle.execution.guards import Outcome, guard, is_awaitable, settle, try_it
from spindle.execution.parallel import map_async, parallel, reduce_async
from spindle.execution.retry import (
    Abort,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    RetryOptions,
    retry,
    with_retry,
)
from spindle.execution.timing import sleep

__all__ = [
    # guards
    "Outcome",
    "guard",
    "is_awaitable",
    "settle",
    "try_it",
    # timing
    "sleep",
    # defer
    "Register",
    "defer",
    # parallel
    "map_async",
    "parallel",
    "reduce_async",
    # gather
    "all_",
    # retry
    "Abort",
    "ConstantBackoff",
    "ExponentialBackoff",
    "LinearBackoff",
    "RetryOptions",
    "retry",
    "with_retry",
]
