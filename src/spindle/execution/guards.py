"""Result-wrapping helpers.

``try_it`` turns "may raise" into "returns ``(error, value)``" without the
caller having to care whether the wrapped function is a coroutine function,
a plain function, or a plain function that happens to return an awaitable.

Example::

    err, user = await try_it(api.users.find)(user_id)
    if err is not None:
        ...

    err, parsed = try_it(json.loads)(payload)   # no await for sync callables

Only :class:`Exception` is captured. ``asyncio.CancelledError``,
``KeyboardInterrupt`` and ``SystemExit`` always propagate.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")

Outcome = tuple[BaseException, None] | tuple[None, Any]


def is_awaitable(value: Any) -> bool:
    """True for coroutines, futures, tasks and anything with ``__await__``."""
    return inspect.isawaitable(value)


async def _await_outcome(awaitable: Awaitable[T]) -> Outcome:
    try:
        return (None, await awaitable)
    except Exception as e:
        return (e, None)


def try_it(func: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap ``func`` so that calling it never raises.

    The wrapper returns ``(None, value)`` on success and ``(error, None)`` on
    failure. When ``func`` returns an awaitable the wrapper returns a
    coroutine that resolves to the same pair, so async callers ``await`` it
    and sync callers don't.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            return (e, None)
        if is_awaitable(result):
            return _await_outcome(result)
        return (None, result)

    return wrapper


async def settle(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Outcome:
    """Call ``func`` and always await an ``(error, value)`` pair.

    Used by the combinators, which accept both sync and async callables.
    """
    outcome = try_it(func)(*args, **kwargs)
    if is_awaitable(outcome):
        outcome = await outcome
    return outcome


def guard(
    func: Callable[[], Any],
    should_guard: Callable[[BaseException], bool] | None = None,
) -> Any:
    """Call ``func`` and return ``None`` instead of raising.

    ``should_guard`` narrows which errors are swallowed; any error it
    rejects is re-raised. Awaitable results come back as a coroutine::

        users = await guard(fetch_users) or []
    """

    def _on_error(error: Exception) -> None:
        if should_guard is not None and not should_guard(error):
            raise error
        return None

    async def _guard_awaitable(awaitable: Awaitable[Any]) -> Any:
        try:
            return await awaitable
        except Exception as e:
            return _on_error(e)

    try:
        result = func()
    except Exception as e:
        return _on_error(e)
    if is_awaitable(result):
        return _guard_awaitable(result)
    return result


__all__ = ["Outcome", "is_awaitable", "try_it", "settle", "guard"]
