"""Millisecond sleep used between retry attempts."""

from __future__ import annotations

import asyncio
from collections.abc import Callable


async def sleep(milliseconds: float, callback: Callable[[], object] | None = None) -> None:
    """Suspend the current task for ``milliseconds``.

    ``callback`` runs right before the task suspends. Negative durations are
    treated as zero.
    """
    if callback is not None:
        callback()
    await asyncio.sleep(max(0.0, milliseconds) / 1000)


__all__ = ["sleep"]
