"""Deferred cleanup runner.

``defer`` is a ``finally`` block whose contents are registered while the body
runs, for script-like code that creates resources step by step::

    async def provision(register):
        org = await api.orgs.create()
        register(lambda err: api.orgs.delete(org.id), rethrow=True)

        user = await api.users.create(org.id)
        register(lambda err: api.users.delete(user.id), rethrow=True)

        await run_checks(org, user)

    await defer(provision)

Cleanups run in registration order and receive the body's error (or
``None``). Every cleanup runs even if an earlier one failed.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from spindle.core.errors import AggregateError
from spindle.core.logging import get_logger
from spindle.execution.guards import settle

logger = get_logger(__name__)


class Register(Protocol):
    def __call__(
        self, fn: Callable[[BaseException | None], Any], *, rethrow: bool = False
    ) -> None: ...


@dataclass(slots=True)
class _Cleanup:
    fn: Callable[[BaseException | None], Any]
    rethrow: bool


async def defer(func: Callable[[Register], Any]) -> Any:
    """Run ``func(register)`` and then every registered cleanup.

    Returns:
        Whatever ``func`` returned.

    Raises:
        AggregateError: One or more cleanups registered with ``rethrow=True``
            failed. Chained from the body's error, if the body failed too.
        Exception: The body's own error, unchanged, when no rethrowing
            cleanup failed.
    """
    cleanups: list[_Cleanup] = []

    def register(fn: Callable[[BaseException | None], Any], *, rethrow: bool = False) -> None:
        cleanups.append(_Cleanup(fn=fn, rethrow=rethrow))

    error, response = await settle(func, register)

    rethrown: list[BaseException] = []
    for cleanup in cleanups:
        cleanup_error, _ = await settle(cleanup.fn, error)
        if cleanup_error is None:
            continue
        if cleanup.rethrow:
            rethrown.append(cleanup_error)
        else:
            logger.warning(
                "defer.cleanup_failed",
                cleanup=getattr(cleanup.fn, "__qualname__", repr(cleanup.fn)),
                error=str(cleanup_error),
            )

    if rethrown:
        raise AggregateError(rethrown) from error
    if error is not None:
        raise error
    return response


__all__ = ["Register", "defer"]
