"""Retry an operation with optional fixed delay and computed backoff.

Example:
    >>> await retry({}, api.users.list)                       # 3 attempts
    >>> await retry({"times": 10}, api.users.list)
    >>> await retry({"times": 2, "delay": 1000}, api.users.list)
    >>> await retry({"backoff": lambda i: 10 ** i}, api.users.list)
    >>> await retry({"backoff": ExponentialBackoff(base_delay=50)}, api.users.list)

The operation receives an ``exit`` callback. Calling ``exit(err)`` stops the
loop immediately and ``err`` is raised unchanged. Returning ``Abort(err)``
does the same without raising inside the operation::

    async def fetch(exit):
        response = await client.get(url)
        if response.status_code == 404:
            return Abort(NotFound(url))      # or: exit(NotFound(url))
        response.raise_for_status()
        return response.json()

    data = await retry(RetryOptions(times=5, delay=200), fetch)

Attempt lifecycle::

    Attempting(1) ──ok──► Succeeded
        │ error
        ├── exit()/Abort ──► ExitedEarly (raise err)
        ▼
    sleep(delay) → sleep(backoff(1))
        ▼
    Attempting(2) ... Attempting(times) ──error──► Exhausted (raise last error)
"""

from __future__ import annotations

import functools
import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, NoReturn

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from spindle.core.errors import InvalidArgumentError
from spindle.core.logging import get_logger
from spindle.core.settings import get_settings
from spindle.execution.guards import settle
from spindle.execution.timing import sleep

logger = get_logger(__name__)


class RetryOptions(BaseModel):
    """
    Retry configuration.

    Attributes:
        times: Total attempts, including the first (default from
            ``SPINDLE_RETRY_TIMES``, normally 3)
        delay: Fixed wait in milliseconds between attempts
        backoff: ``attempt -> milliseconds``, applied after ``delay``;
            attempt numbers start at 1
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    times: int = Field(default_factory=lambda: get_settings().retry_times, ge=1)
    delay: float | None = Field(default=None, ge=0)
    backoff: Callable[[int], float] | None = None

    @classmethod
    def coerce(cls, value: RetryOptions | Mapping[str, Any] | None) -> RetryOptions:
        """Build options from ``None``, a mapping, or an existing instance.

        Raises:
            InvalidArgumentError: ``value`` itself is invalid.
            ConfigError: ``times`` was omitted and the configured default is
                invalid.
        """
        if isinstance(value, cls):
            return value
        if value is not None and not isinstance(value, Mapping):
            raise InvalidArgumentError(
                f"retry options must be a mapping or RetryOptions, got {type(value).__name__}"
            )
        fields = dict(value or {})
        if "times" not in fields:
            fields["times"] = get_settings().retry_times
        try:
            return cls.model_validate(fields)
        except ValidationError as e:
            raise InvalidArgumentError(f"invalid retry options: {e}", cause=e) from e


@dataclass(frozen=True, slots=True)
class Abort:
    """Returned by an operation to stop retrying and raise ``error``."""

    error: BaseException


class _RetryExit(BaseException):
    """Raised by ``exit``. A BaseException so ``except Exception`` in user code
    doesn't swallow it."""

    def __init__(self, error: BaseException, owner: object):
        super().__init__(error)
        self.error = error
        self.owner = owner


async def retry(
    options: RetryOptions | Mapping[str, Any] | None,
    func: Callable[[Callable[[BaseException], NoReturn]], Any],
) -> Any:
    """Call ``func(exit)`` until it succeeds or ``options.times`` is used up.

    Returns:
        The value of the first successful attempt.

    Raises:
        InvalidArgumentError: ``options`` is invalid.
        Exception: The error passed to ``exit``/``Abort``, or the error of
            the final attempt, unchanged.
    """
    opts = RetryOptions.coerce(options)
    owner = object()

    def exit_retry(error: BaseException) -> NoReturn:
        raise _RetryExit(error, owner)

    attempt = 0
    while True:
        attempt += 1
        try:
            error, result = await settle(func, exit_retry)
        except _RetryExit as signal:
            if signal.owner is not owner:
                raise
            logger.debug("retry.exited", attempt=attempt, error=str(signal.error))
            raise signal.error from None

        if error is None:
            if isinstance(result, Abort):
                logger.debug("retry.exited", attempt=attempt, error=str(result.error))
                raise result.error
            return result

        if attempt >= opts.times:
            logger.warning("retry.exhausted", attempts=attempt, error=str(error))
            raise error

        logger.debug(
            "retry.attempt_failed",
            attempt=attempt,
            times=opts.times,
            error=str(error),
        )
        if opts.delay:
            await sleep(opts.delay)
        if opts.backoff is not None:
            await sleep(opts.backoff(attempt))


def with_retry(
    options: RetryOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator factory that runs the decorated function through :func:`retry`.

    The decorated function is always async. It does not receive ``exit``;
    it can stop early by returning :class:`Abort`. Options are resolved on
    every call, so an omitted ``times`` follows the current settings.

    Example:
        >>> @with_retry(times=5, backoff=ExponentialBackoff(base_delay=100))
        ... async def flaky_operation():
        ...     return await call_api()
    """
    if options is not None and not isinstance(options, (RetryOptions, Mapping)):
        raise InvalidArgumentError(
            f"retry options must be a mapping or RetryOptions, got {type(options).__name__}"
        )

    def _resolve() -> RetryOptions:
        if isinstance(options, RetryOptions):
            if not overrides:
                return options
            return RetryOptions.coerce({**dict(options), **overrides})
        return RetryOptions.coerce({**(options or {}), **overrides})

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await retry(_resolve(), lambda _exit: func(*args, **kwargs))

        return wrapper

    return decorator


# =============================================================================
# BACKOFF STRATEGIES
# =============================================================================


@dataclass
class ExponentialBackoff:
    """Exponential backoff with optional jitter.

    Delay = min(base_delay * multiplier ** (attempt - 1), max_delay) +/- jitter

    All values are milliseconds.
    """

    base_delay: float = 100.0
    multiplier: float = 2.0
    max_delay: float = 60_000.0
    jitter: bool = True
    jitter_range: float = 0.25

    def next_delay(self, attempt: int) -> float:
        delay = min(self.base_delay * (self.multiplier ** (attempt - 1)), self.max_delay)
        if self.jitter:
            jitter_amount = delay * self.jitter_range
            delay = max(0.0, delay + random.uniform(-jitter_amount, jitter_amount))
        return delay

    def __call__(self, attempt: int) -> float:
        return self.next_delay(attempt)


@dataclass
class LinearBackoff:
    """Delay = min(base_delay + increment * (attempt - 1), max_delay)"""

    base_delay: float = 100.0
    increment: float = 100.0
    max_delay: float = 30_000.0

    def next_delay(self, attempt: int) -> float:
        return min(self.base_delay + self.increment * (attempt - 1), self.max_delay)

    def __call__(self, attempt: int) -> float:
        return self.next_delay(attempt)


@dataclass
class ConstantBackoff:
    """Same delay after every attempt."""

    delay: float = 100.0

    def next_delay(self, attempt: int) -> float:
        return self.delay

    def __call__(self, attempt: int) -> float:
        return self.next_delay(attempt)


__all__ = [
    "RetryOptions",
    "Abort",
    "retry",
    "with_retry",
    "ExponentialBackoff",
    "LinearBackoff",
    "ConstantBackoff",
]
