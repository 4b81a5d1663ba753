"""Retry policies: pure functions from attempt index to delay.

A RetryPolicy maps the zero-based number of attempts already made to either
a delay in microseconds or None ("stop retrying"). Policies compose with `+`:

1. If either policy returns None, the combined policy returns None.
2. If both return a delay, the larger delay wins.

IDENTITY retries immediately (delay 0) forever and is the neutral element.

Example:
    >>> limited = exponential_backoff(50_000) + limit_retries(5)
    >>> [limited(n) for n in range(6)]
    [50000, 100000, 200000, 400000, 800000, None]
    >>> bounded = cap_delay(2_000_000, exponential_backoff(50_000)) + limit_retries(10)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import reduce
from typing import Callable, TypeAlias

from retrykit.foundation.config import get_settings
from retrykit.foundation.errors import PolicyError

DelayFn: TypeAlias = Callable[[int], "int | None"]

# Delays saturate here instead of growing without bound (signed 64-bit max)
MAX_DELAY: int = 2**63 - 1


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Immutable wrapper around a delay function.

    Call the policy (or `.delay`) with an iteration index to get the delay in
    microseconds, or None when retrying should stop. Policies hold no state
    and may be shared freely between concurrent drivers.

    For anything the combinators don't cover, wrap your own function:
        >>> RetryPolicy(lambda n: 1_000 if n > 10 else 10_000)
    """

    fn: DelayFn = field(repr=False)
    label: str = field(default="custom", compare=False)

    def __call__(self, n: int) -> int | None:
        return self.fn(n)

    def delay(self, n: int) -> int | None:
        """Delay in microseconds before retry `n`, or None to stop."""
        return self.fn(n)

    def __add__(self, other: object) -> RetryPolicy:
        if not isinstance(other, RetryPolicy):
            return NotImplemented
        a, b = self.fn, other.fn

        def combined(n: int) -> int | None:
            if (x := a(n)) is None or (y := b(n)) is None:
                return None
            return max(x, y)

        return RetryPolicy(combined, f"{self.label} + {other.label}")

    @classmethod
    def identity(cls) -> RetryPolicy:
        """Neutral element of `+`: zero delay, unlimited retries."""
        return IDENTITY

    def __repr__(self) -> str:
        return f"RetryPolicy({self.label})"


IDENTITY = RetryPolicy(lambda _: 0, "identity")


def combine(*policies: RetryPolicy) -> RetryPolicy:
    """Fold policies with `+`. `combine()` is IDENTITY."""
    return reduce(RetryPolicy.__add__, policies, IDENTITY) if policies else IDENTITY


def _require_non_negative(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise PolicyError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise PolicyError(f"{name} must be >= 0, got {value}")
    return value


def _require_policy(inner: RetryPolicy) -> RetryPolicy:
    if not isinstance(inner, RetryPolicy):
        raise PolicyError(f"expected RetryPolicy, got {type(inner).__name__}")
    return inner


# ─────────────────────────────────────────────────────────────────────────────
# Combinators
# ─────────────────────────────────────────────────────────────────────────────


def limit_retries(max_attempts: int) -> RetryPolicy:
    """Retry immediately, but only up to `max_attempts` times."""
    limit = _require_non_negative("max_attempts", max_attempts)
    return RetryPolicy(lambda n: 0 if n < limit else None, f"limit_retries({limit})")


def limit_retries_by_delay(cutoff: int, inner: RetryPolicy) -> RetryPolicy:
    """Stop once `inner` asks for a delay of `cutoff` microseconds or more."""
    cutoff = _require_non_negative("cutoff", cutoff)
    fn = _require_policy(inner).fn

    def limited(n: int) -> int | None:
        d = fn(n)
        return None if d is None or d >= cutoff else d

    return RetryPolicy(limited, f"limit_retries_by_delay({cutoff}, {inner.label})")


def constant_delay(base: int) -> RetryPolicy:
    """Fixed delay in microseconds, unlimited retries."""
    base = _require_non_negative("base", base)
    return RetryPolicy(lambda _: base, f"constant_delay({base})")


def exponential_backoff(base: int) -> RetryPolicy:
    """Delay doubles every iteration: `2**n * base`, saturating at MAX_DELAY."""
    base = _require_non_negative("base", base)

    def exponential(n: int) -> int:
        if base == 0:
            return 0
        if base.bit_length() + n > 63:
            return MAX_DELAY
        return base << n

    return RetryPolicy(exponential, f"exponential_backoff({base})")


def fibonacci_backoff(base: int) -> RetryPolicy:
    """Fibonacci growth seeded at (0, base): base, base, 2*base, 3*base, 5*base, ..."""
    base = _require_non_negative("base", base)

    def fibonacci(n: int) -> int:
        a, b = 0, base
        for _ in range(n + 1):
            a, b = b, min(a + b, MAX_DELAY)
            if a == MAX_DELAY or b == 0:
                break
        return a

    return RetryPolicy(fibonacci, f"fibonacci_backoff({base})")


def cap_delay(max_delay: int, inner: RetryPolicy) -> RetryPolicy:
    """Clamp delays from `inner` to `max_delay`.

    Never terminates retrying by itself: `cap_delay(m, exponential_backoff(b))`
    retries forever, eventually every `m` microseconds. Combine with
    `limit_retries` to get termination.
    """
    max_delay = _require_non_negative("max_delay", max_delay)
    fn = _require_policy(inner).fn

    def capped(n: int) -> int | None:
        d = fn(n)
        return None if d is None else min(max_delay, d)

    return RetryPolicy(capped, f"cap_delay({max_delay}, {inner.label})")


# Constant 50ms delay, up to 5 retries
DEFAULT_POLICY = constant_delay(50_000) + limit_retries(5)


def default_policy() -> RetryPolicy:
    """Default policy from settings (RETRYKIT_RETRY_BASE_DELAY / _MAX_RETRIES)."""
    cfg = get_settings().retry
    return constant_delay(cfg.base_delay) + limit_retries(cfg.max_retries)


def simulate_policy(policy: RetryPolicy, attempts: int) -> list[tuple[int, int | None]]:
    """Preview `(n, delay)` for the first `attempts` iterations, ending at the first stop.

    Example:
        >>> simulate_policy(DEFAULT_POLICY, 10)[-2:]
        [(4, 50000), (5, None)]
    """
    out: list[tuple[int, int | None]] = []
    for n in range(_require_non_negative("attempts", attempts)):
        out.append((n, d := policy(n)))
        if d is None:
            break
    return out
