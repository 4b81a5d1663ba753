"""Cancellation helpers for async drivers.

Key Features:
    - Checkpoints: Cooperative cancellation points
    - Shield: Protect an awaitable from the caller's cancellation
    - Uninterruptible: Finish an awaitable, then honor a deferred cancellation

Example:
    >>> async def decide(exc):
    ...     await audit_log.write(exc)
    ...     return True
    >>> verdict = await uninterruptible(decide(exc))  # cancel waits for the write
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


async def shield(aw: Awaitable[T]) -> T:
    """Shield an awaitable from cancellation.

    The awaitable keeps running if the calling task is cancelled, but the
    caller still sees CancelledError right away. Use `uninterruptible` when
    the caller must also wait for the result.
    """
    return await asyncio.shield(aw)


async def checkpoint() -> None:
    """Cooperative cancellation checkpoint.

    Yields control to the event loop, allowing pending cancellations
    to be processed.
    """
    await asyncio.sleep(0)


async def uninterruptible(aw: Awaitable[T]) -> T:
    """Run `aw` to completion even if the calling task is cancelled meanwhile.

    Cancellation requests that arrive while `aw` is running are deferred: once
    `aw` finishes, CancelledError is raised in the caller (its result is
    dropped). If `aw` failed meanwhile, its exception becomes the cause of that
    CancelledError; without a pending cancel it propagates as is.
    """
    inner = asyncio.ensure_future(aw)
    cancelled = False
    while not inner.done():
        try:
            await shield(inner)
        except asyncio.CancelledError:
            if inner.cancelled():
                raise
            cancelled = True
    if cancelled:
        raise asyncio.CancelledError() from inner.exception()
    return inner.result()
