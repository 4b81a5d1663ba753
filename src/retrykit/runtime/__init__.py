"""Runtime - Retry execution, cancellation control, and logging.

Contains: retry, concurrency, observability.
"""

from __future__ import annotations

from .concurrency import checkpoint, shield, uninterruptible
from .observability import JsonFormatter, configure_logging
from .retry import (
    DEFAULT_POLICY,
    IDENTITY,
    MAX_DELAY,
    Handler,
    HandlerFactory,
    RetryPolicy,
    cap_delay,
    combine,
    constant_delay,
    default_policy,
    exponential_backoff,
    fibonacci_backoff,
    handler,
    limit_retries,
    limit_retries_by_delay,
    log_retries,
    on_code,
    recover_all,
    recover_all_async,
    recovering,
    recovering_async,
    retry_all,
    retrying,
    retrying_async,
    simulate_policy,
    transient,
)

__all__ = [
    # Retry
    "RetryPolicy", "IDENTITY", "DEFAULT_POLICY", "MAX_DELAY", "combine", "default_policy", "simulate_policy",
    "limit_retries", "limit_retries_by_delay", "constant_delay", "exponential_backoff", "fibonacci_backoff", "cap_delay",
    "Handler", "HandlerFactory", "handler", "on_code", "retry_all", "transient", "log_retries",
    "retrying", "retrying_async", "recovering", "recovering_async", "recover_all", "recover_all_async",
    # Concurrency
    "checkpoint", "shield", "uninterruptible",
    # Observability
    "JsonFormatter", "configure_logging",
]
