"""Execution drivers that apply a RetryPolicy to an action.

- retrying: Retry based on the action's result (never raises on exhaustion)
- recovering: Retry based on raised exceptions, classified by ordered handlers
- recover_all: recovering with a single catch-everything handler

Each driver has an async twin whose pause is `asyncio.sleep`, suspending only
the calling task. Only `Exception` subclasses are classified, so
KeyboardInterrupt, SystemExit and CancelledError always propagate from the
action and from the pause. The async recovering driver additionally defers
cancellation while a handler's decision is in flight.

Example:
    >>> retrying(DEFAULT_POLICY, lambda n, r: r is None, poll_job)
    >>> recovering(
    ...     exponential_backoff(100_000) + limit_retries(5),
    ...     [handler(ConnectionError), log_retries(lambda e: True)],
    ...     fetch_page,
    ... )
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
import time
from collections.abc import Awaitable, Sequence
from typing import Callable, TypeVar

from retrykit.runtime.concurrency import checkpoint, uninterruptible

from .handlers import Handler, HandlerFactory, retry_all
from .policy import RetryPolicy

T = TypeVar("T")

logger = logging.getLogger("retrykit.retry")


def _seconds(delay: int) -> float:
    """Pause length in seconds, clamped to the longest sleep the platform supports."""
    return min(delay / 1_000_000, threading.TIMEOUT_MAX)


def _sync_verdict(verdict: object, driver: str) -> bool:
    """Reject awaitable verdicts in sync drivers instead of treating them as truthy."""
    if inspect.isawaitable(verdict):
        if inspect.iscoroutine(verdict):
            verdict.close()
        raise TypeError(f"async decision requires {driver}_async")
    return bool(verdict)


def _next_delay(policy: RetryPolicy, n: int) -> int | None:
    """Query the policy, logging the outcome."""
    delay = policy(n)
    if delay is None:
        logger.info(f"Retry policy exhausted after {n} retries")
    else:
        logger.debug(f"Retry {n + 1} scheduled in {delay}us")
    return delay


def _match(factories: Sequence[HandlerFactory], n: int, exc: BaseException) -> Handler | None:
    """First handler (built for iteration `n`) whose kind matches `exc`."""
    for make in factories:
        if (h := make(n)).matches(exc):
            return h
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Value-based retry
# ─────────────────────────────────────────────────────────────────────────────


def retrying(policy: RetryPolicy, check: Callable[[int, T], bool], action: Callable[[], T]) -> T:
    """Run `action` until `check` accepts its result or the policy is exhausted.

    Args:
        policy: Delay/stop policy consulted after each rejected result
        check: `(iteration, result) -> bool`; True means retry
        action: Zero-argument callable to run

    Returns:
        The first result `check` accepts, or the last result when the policy
        stops. Exhaustion is never raised; inspect the result yourself.

    Example:
        >>> retrying(DEFAULT_POLICY, lambda n, r: r is None, lambda: None)
        # runs 6 times (1 + 5 retries), returns None
    """
    n = 0
    while True:
        result = action()
        if not _sync_verdict(check(n, result), "retrying"):
            return result
        if (delay := _next_delay(policy, n)) is None:
            return result
        time.sleep(_seconds(delay))
        n += 1


async def retrying_async(
    policy: RetryPolicy,
    check: Callable[[int, T], bool | Awaitable[bool]],
    action: Callable[[], Awaitable[T]],
) -> T:
    """Async `retrying`. `check` may be sync or async."""
    n = 0
    while True:
        result = await action()
        verdict = check(n, result)
        if inspect.isawaitable(verdict):
            verdict = await verdict
        if not verdict:
            return result
        if (delay := _next_delay(policy, n)) is None:
            return result
        await asyncio.sleep(_seconds(delay))
        n += 1


# ─────────────────────────────────────────────────────────────────────────────
# Exception-based recovery
# ─────────────────────────────────────────────────────────────────────────────


def recovering(policy: RetryPolicy, handlers: Sequence[HandlerFactory], action: Callable[[], T]) -> T:
    """Run `action`, retrying raised exceptions that a handler elects to retry.

    For each failure, handlers are built with the current iteration and
    scanned in order; the first whose kind matches decides alone. The original
    exception is re-raised when no handler matches, the matched handler
    declines, or the policy stops.

    Args:
        policy: Delay/stop policy
        handlers: Ordered handler factories
        action: Zero-argument callable to run

    Returns:
        The first successful result of `action`
    """
    n = 0
    while True:
        try:
            return action()
        except Exception as e:
            h = _match(handlers, n, e)
            if h is None or not _sync_verdict(h.decide(e), "recovering"):
                raise
            if (delay := _next_delay(policy, n)) is None:
                raise
        time.sleep(_seconds(delay))
        n += 1


async def recovering_async(
    policy: RetryPolicy,
    handlers: Sequence[HandlerFactory],
    action: Callable[[], Awaitable[T]],
) -> T:
    """Async `recovering`.

    The action and the pause are cancellable. Matching and the handler's
    decision (which may be async) run to completion before a pending
    cancellation is honored, so a retry verdict is never cut short.
    """
    n = 0
    while True:
        try:
            return await action()
        except Exception as e:
            if not await uninterruptible(_decide(handlers, n, e)):
                raise
            if (delay := _next_delay(policy, n)) is None:
                raise
        await asyncio.sleep(_seconds(delay))
        await checkpoint()
        n += 1


async def _decide(handlers: Sequence[HandlerFactory], n: int, exc: BaseException) -> bool:
    if (h := _match(handlers, n, exc)) is None:
        return False
    verdict = h.decide(exc)
    if inspect.isawaitable(verdict):
        verdict = await verdict
    return bool(verdict)


def recover_all(policy: RetryPolicy, action: Callable[[], T]) -> T:
    """Retry every Exception `action` raises until the policy stops.

    Use with caution: this also retries bugs and unrecoverable failures.
    Prefer `recovering` with narrow handlers.
    """
    return recovering(policy, [retry_all], action)


async def recover_all_async(policy: RetryPolicy, action: Callable[[], Awaitable[T]]) -> T:
    """Async `recover_all`."""
    return await recovering_async(policy, [retry_all], action)
