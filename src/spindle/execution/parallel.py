"""Bounded async fan-out.

WHY
───
``asyncio.gather`` over a thousand coroutines starts a thousand requests at
once. ``parallel`` caps that at ``limit`` in-flight calls while still keeping
the "one list in, one list out" shape of a plain ``map``.

ARCHITECTURE
────────────
::

    items ──► work stack [(0, a), (1, b), (2, c), ...]
                 │ pop()          │ pop()          │ pop()
              worker 1         worker 2   ...   worker N   (N = min(limit, len))
                 │                │                │
                 └── settle(func, item) ──► (index, Ok | Err)
                                  │
                        sort by index, partition
                                  │
                  errors? ──► AggregateError(errors)
                  else    ──► [values in input order]

Workers pull from a shared stack until it is empty, so a fast worker picks
up more items than a slow one. Claims happen between suspension points on a
single event loop and need no lock. The claim order is an implementation
detail; only the output order is guaranteed.

Example::

    users = await parallel(3, user_ids, api.users.find)

The sequential helpers :func:`map_async` and :func:`reduce_async` live here
too for callers that need strict one-at-a-time ordering.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from spindle.core.errors import AggregateError, InvalidArgumentError
from spindle.core.logging import get_logger
from spindle.core.result import Result, from_outcome, partition_results
from spindle.execution.guards import settle

logger = get_logger(__name__)

T = TypeVar("T")
K = TypeVar("K")

MISSING: Any = object()


async def parallel(
    limit: int,
    items: Iterable[T],
    func: Callable[[T], Awaitable[K] | K],
) -> list[K]:
    """Run ``func`` over ``items`` with at most ``limit`` calls in flight.

    Every item is processed even when some fail.

    Args:
        limit: Worker count, an integer >= 1.
        items: Inputs; consumed once.
        func: Sync or async callable applied to each item.

    Returns:
        Results in the same order as ``items``.

    Raises:
        InvalidArgumentError: ``limit`` is not a positive integer.
        AggregateError: One or more calls failed. ``errors`` holds the
            failures in input order; successful values are discarded.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidArgumentError(f"limit must be a positive integer, got {limit!r}")

    work: list[tuple[int, T]] = list(enumerate(items))
    workers = min(limit, len(work))

    logger.debug("parallel.start", items=len(work), limit=limit, workers=workers)

    async def _worker() -> list[tuple[int, Result[K]]]:
        done: list[tuple[int, Result[K]]] = []
        while work:
            index, item = work.pop()
            error, value = await settle(func, item)
            if error is not None:
                logger.debug("parallel.item_failed", index=index, error=str(error))
            done.append((index, from_outcome(error, value)))
        return done

    batches = await asyncio.gather(*(_worker() for _ in range(workers)))

    ordered = sorted(
        (entry for batch in batches for entry in batch),
        key=lambda entry: entry[0],
    )
    values, errors = partition_results(result for _, result in ordered)

    logger.debug("parallel.complete", succeeded=len(values), failed=len(errors))

    if errors:
        raise AggregateError(errors)
    return values


async def map_async(
    items: Iterable[T] | None,
    func: Callable[[T, int], Awaitable[K]],
) -> list[K]:
    """Sequential async map; ``func(item, index)`` is awaited one at a time."""
    if items is None:
        return []
    return [await func(item, index) for index, item in enumerate(items)]


async def reduce_async(
    items: Iterable[T],
    func: Callable[[Any, T, int], Awaitable[Any]],
    initial: Any = MISSING,
) -> Any:
    """Sequential async reduce.

    Without ``initial`` the first item seeds the accumulator and indexes
    passed to ``func`` count from zero over the remaining items.

    Raises:
        InvalidArgumentError: ``items`` is empty and no ``initial`` was given.
    """
    iterator = iter(items)
    if initial is MISSING:
        try:
            accumulator = next(iterator)
        except StopIteration:
            raise InvalidArgumentError("Cannot reduce empty array with no init value") from None
    else:
        accumulator = initial

    for index, item in enumerate(iterator):
        accumulator = await func(accumulator, item, index)
    return accumulator


__all__ = ["parallel", "map_async", "reduce_async"]
