"""Tests for async retry drivers and their cancellation behavior."""

from __future__ import annotations

import asyncio
import time

import pytest

from retrykit import (
    DEFAULT_POLICY,
    constant_delay,
    handler,
    limit_retries,
    log_retries,
    recover_all_async,
    recovering_async,
    retrying_async,
)
from retrykit.runtime.concurrency import uninterruptible


class Transient(Exception):
    pass


class Fatal(Exception):
    pass


FAST = constant_delay(1_000) + limit_retries(5)


@pytest.mark.asyncio
async def test_retrying_async_exhausts_policy() -> None:
    calls = 0

    async def action() -> str:
        nonlocal calls
        calls += 1
        return "failed"

    start = time.perf_counter()
    assert await retrying_async(DEFAULT_POLICY, lambda n, r: True, action) == "failed"
    assert calls == 6
    assert time.perf_counter() - start >= 0.25


@pytest.mark.asyncio
async def test_retrying_async_accepts_async_check() -> None:
    results = iter([None, None, 42])

    async def action() -> int | None:
        return next(results)

    async def check(n: int, r: int | None) -> bool:
        return r is None

    assert await retrying_async(FAST, check, action) == 42


@pytest.mark.asyncio
async def test_recovering_async_handler_order() -> None:
    calls = 0

    async def action() -> None:
        nonlocal calls
        calls += 1
        raise Transient()

    with pytest.raises(Transient):
        await recovering_async(FAST, [handler(Fatal, lambda e: False), handler(Transient)], action)
    assert calls == 6


@pytest.mark.asyncio
async def test_recovering_async_declining_handler_is_fatal() -> None:
    calls = 0

    async def action() -> None:
        nonlocal calls
        calls += 1
        raise Fatal()

    with pytest.raises(Fatal):
        await recovering_async(FAST, [handler(Fatal, lambda e: False)], action)
    assert calls == 1


@pytest.mark.asyncio
async def test_recovering_async_with_async_decision() -> None:
    outcomes = iter([Transient(), Transient(), "ok"])

    async def action() -> str:
        if isinstance(o := next(outcomes), Exception):
            raise o
        return o

    async def decide(e: BaseException) -> bool:
        await asyncio.sleep(0)
        return True

    assert await recovering_async(FAST, [handler(Transient, decide)], action) == "ok"


@pytest.mark.asyncio
async def test_recover_all_async() -> None:
    outcomes = iter([ValueError(), KeyError(), "done"])

    async def action() -> str:
        if isinstance(o := next(outcomes), Exception):
            raise o
        return o

    assert await recover_all_async(FAST, action) == "done"


@pytest.mark.asyncio
async def test_log_retries_async_reporter() -> None:
    messages: list[str] = []

    async def report(msg: str) -> None:
        messages.append(msg)

    async def action() -> None:
        raise Transient("x")

    with pytest.raises(Transient):
        await recovering_async(limit_retries(1), [log_retries(lambda e: True, report)], action)
    assert messages == [
        "[retry:0] Encountered Transient('x'). Retrying.",
        "[retry:1] Encountered Transient('x'). Retrying.",
    ]


# ─────────────────────────────────────────────────────────────────────────────
# Cancellation
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_cancel_during_action_is_prompt() -> None:
    started = asyncio.Event()

    async def action() -> None:
        started.set()
        await asyncio.sleep(10)

    task = asyncio.create_task(recover_all_async(DEFAULT_POLICY, action))
    await started.wait()
    start = time.perf_counter()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert time.perf_counter() - start < 1.0


@pytest.mark.asyncio
async def test_cancel_during_pause_is_prompt() -> None:
    calls = 0

    async def action() -> None:
        nonlocal calls
        calls += 1
        raise Transient()

    task = asyncio.create_task(recover_all_async(constant_delay(10_000_000), action))
    while calls == 0:
        await asyncio.sleep(0.001)
    await asyncio.sleep(0.01)
    start = time.perf_counter()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert time.perf_counter() - start < 1.0
    assert calls == 1


@pytest.mark.asyncio
async def test_cancel_during_decision_is_deferred() -> None:
    deciding = asyncio.Event()
    finished: list[bool] = []
    calls = 0

    async def action() -> None:
        nonlocal calls
        calls += 1
        raise Transient()

    async def decide(e: BaseException) -> bool:
        deciding.set()
        await asyncio.sleep(0.05)
        finished.append(True)
        return True

    task = asyncio.create_task(recovering_async(FAST, [handler(Transient, decide)], action))
    await deciding.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert finished == [True]
    assert calls == 1


@pytest.mark.asyncio
async def test_uninterruptible_returns_result() -> None:
    async def work() -> int:
        await asyncio.sleep(0)
        return 7

    assert await uninterruptible(work()) == 7


@pytest.mark.asyncio
async def test_uninterruptible_propagates_failure() -> None:
    async def work() -> int:
        raise Fatal("no")

    with pytest.raises(Fatal, match="no"):
        await uninterruptible(work())


@pytest.mark.asyncio
async def test_uninterruptible_keeps_cancel_when_work_fails() -> None:
    started = asyncio.Event()
    caught: list[BaseException] = []

    async def work() -> int:
        started.set()
        await asyncio.sleep(0.05)
        raise Fatal("decision failed")

    async def runner() -> None:
        try:
            await uninterruptible(work())
        except BaseException as e:
            caught.append(e)
            raise

    task = asyncio.create_task(runner())
    await started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert isinstance(caught[0], asyncio.CancelledError)
    assert isinstance(caught[0].__cause__, Fatal)
