"""
Tagged success/failure values.

``try_it`` hands callers a plain ``(error, value)`` tuple because that is the
cheapest thing to unpack at a call site. Inside the combinators the same
outcome is carried as ``Ok``/``Err`` so that it can be matched on and
partitioned without re-checking ``None`` slots.

Examples:
    >>> from spindle.core.result import Ok, Err, partition_results
    >>> values, errors = partition_results([Ok(1), Err(ValueError("x")), Ok(3)])
    >>> values
    [1, 3]
    >>> [str(e) for e in errors]
    ['x']

    >>> match from_outcome(None, 5):
    ...     case Ok(value):
    ...         print(value)
    ...     case Err(error):
    ...         print("failed", error)
    5
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def to_tuple(self) -> tuple[None, T]:
        """Convert back to an ``(error, value)`` pair."""
        return (None, self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result containing an error."""

    error: BaseException

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the wrapped error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err; the error propagates unchanged."""
        return self  # type: ignore[return-value]

    def to_tuple(self) -> tuple[BaseException, None]:
        return (self.error, None)

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def from_outcome(error: BaseException | None, value: Any) -> Result[Any]:
    """Convert an ``(error, value)`` pair into ``Ok``/``Err``."""
    if error is not None:
        return Err(error)
    return Ok(value)


def partition_results(results: Iterable[Result[T]]) -> tuple[list[T], list[BaseException]]:
    """
    Split results into successful values and errors.

    Both lists keep the relative order of ``results``.
    """
    values: list[T] = []
    errors: list[BaseException] = []
    for result in results:
        if isinstance(result, Ok):
            values.append(result.value)
        else:
            errors.append(result.error)
    return values, errors


__all__ = [
    "Ok",
    "Err",
    "Result",
    "from_outcome",
    "partition_results",
]
