"""Structured all-settled gathering.

Like ``asyncio.gather`` but with two differences: it never short-circuits on
the first failure, and it accepts a dict of named awaitables and returns a
dict with the same keys::

    org, bucket = await all_([api.orgs.create(), s3.buckets.create()])

    created = await all_({
        "org": api.orgs.create(),
        "bucket": s3.buckets.create(),
    })
    created["bucket"]

If any entry fails, an :class:`AggregateError` is raised after *all* entries
have settled, with the failures in input order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Mapping, Sequence
from typing import Any, overload

from spindle.core.errors import AggregateError, InvalidArgumentError
from spindle.core.logging import get_logger
from spindle.core.result import Result, from_outcome, partition_results
from spindle.execution.guards import is_awaitable

logger = get_logger(__name__)


async def _settle_awaitable(entry: Awaitable[Any] | Any) -> Result[Any]:
    if not is_awaitable(entry):
        return from_outcome(None, entry)
    try:
        return from_outcome(None, await entry)
    except Exception as e:
        return from_outcome(e, None)


@overload
async def all_(awaitables: Mapping[str, Awaitable[Any]]) -> dict[str, Any]: ...
@overload
async def all_(awaitables: Sequence[Awaitable[Any]]) -> list[Any]: ...


async def all_(awaitables: Mapping[str, Awaitable[Any]] | Sequence[Awaitable[Any]]) -> Any:
    """Await every entry, then return their values in the input's shape.

    Every entry is scheduled before any is awaited. There is no concurrency
    cap; use :func:`~spindle.execution.parallel.parallel` for that.

    Args:
        awaitables: A list/tuple of awaitables, or a mapping of names to
            awaitables. Non-awaitable entries count as already resolved.

    Returns:
        A list for sequence input, a dict with the same keys for mapping input.

    Raises:
        AggregateError: At least one entry failed.
        InvalidArgumentError: ``awaitables`` is neither a mapping nor a
            list/tuple.
    """
    if isinstance(awaitables, Mapping):
        keys: list[Any] | None = list(awaitables.keys())
        entries = list(awaitables.values())
    elif isinstance(awaitables, (list, tuple)):
        keys = None
        entries = list(awaitables)
    else:
        raise InvalidArgumentError(
            f"all_() expects a list, tuple or mapping of awaitables, got {type(awaitables).__name__}"
        )

    results = await asyncio.gather(*(_settle_awaitable(entry) for entry in entries))
    values, errors = partition_results(results)

    if errors:
        logger.debug("all.failed", entries=len(entries), failed=len(errors))
        raise AggregateError(errors)

    if keys is None:
        return values
    return dict(zip(keys, values))


__all__ = ["all_"]
