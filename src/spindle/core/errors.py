"""
Structured error types for spindle.

Every error the library raises on its own behalf is a ``SpindleError``. The
combinators never let a caller's exception escape unaccounted for: a single
failure is re-raised unchanged (``retry``), and a group of independent
failures is bundled into an :class:`AggregateError` (``parallel``, ``all_``,
``defer``).

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                      SpindleError                         │
        │         (category, retryable, cause, to_dict)             │
        ├──────────────────────────────────────────────────────────┤
        │  InvalidArgumentError   ConfigError     AggregateError    │
        │  (VALIDATION)           (CONFIG)        (EXECUTION)       │
        │                                          └─ errors: [...] │
        └──────────────────────────────────────────────────────────┘

Examples:
    Inspecting the failures of a fan-out:

    >>> err = AggregateError([ValueError("bad 2"), KeyError("k")])
    >>> err.name
    'AggregateError(ValueError...)'
    >>> str(err)
    'AggregateError with 2 errors'
    >>> [type(e).__name__ for e in err.errors]
    ['ValueError', 'KeyError']

Usage:
    from spindle.core.errors import AggregateError

    try:
        await parallel(3, user_ids, fetch_user)
    except AggregateError as agg:
        for error in agg.errors:
            logger.warning("fetch_failed", error=str(error))
"""

from __future__ import annotations

import traceback
from enum import Enum
from typing import Any, Sequence


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    EXECUTION = "EXECUTION"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


class SpindleError(Exception):
    """
    Base class for all spindle errors.

    Attributes:
        message: Human readable description
        category: :class:`ErrorCategory` used for routing and reporting
        retryable: Whether repeating the operation may succeed
        cause: Underlying exception, also chained as ``__cause__``
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class InvalidArgumentError(SpindleError, ValueError):
    """A combinator was called with arguments it cannot work with."""

    default_category = ErrorCategory.VALIDATION


class ConfigError(SpindleError):
    """Invalid settings or environment."""

    default_category = ErrorCategory.CONFIG


class AggregateError(SpindleError):
    """
    Several independent operations failed together.

    Raised by ``parallel``, ``all_`` and ``defer`` once every sibling operation
    has settled. The wrapped errors keep the order of the inputs that produced
    them, so ``errors[0]`` belongs to the earliest failing input.

    ``name`` and ``stack`` are borrowed from the wrapped errors to make the
    aggregate readable in logs: the name from the first error,
    the stack from the first error that was actually raised.
    """

    default_category = ErrorCategory.EXECUTION

    def __init__(self, errors: Sequence[BaseException] = ()):
        self.errors: list[BaseException] = list(errors)
        super().__init__(
            f"AggregateError with {len(self.errors)} errors",
            retryable=bool(self.errors) and all(is_retryable(e) for e in self.errors),
        )
        self.name = f"AggregateError({_first_name(self.errors)}...)"

    @property
    def stack(self) -> str:
        """Formatted traceback of the first wrapped error that has one."""
        for error in self.errors:
            if error.__traceback__ is not None:
                return "".join(traceback.format_exception(error))
        return "".join(traceback.format_exception(self))

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["name"] = self.name
        result["errors"] = [
            {"error_type": type(e).__name__, "message": str(e)} for e in self.errors
        ]
        return result


def _first_name(errors: Sequence[BaseException]) -> str:
    if not errors:
        return ""
    first = errors[0]
    name = getattr(first, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(first).__name__


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: BaseException) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, SpindleError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def categorize_error(error: BaseException) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, SpindleError):
        return error.category
    if isinstance(error, (ValueError, TypeError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "SpindleError",
    "InvalidArgumentError",
    "ConfigError",
    "AggregateError",
    "is_retryable",
    "categorize_error",
]
