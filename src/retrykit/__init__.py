"""retrykit - Composable retry policies and retry drivers.

A RetryPolicy maps the number of attempts already made to a delay in
microseconds, or None to stop. Policies combine with `+` (stop wins, larger
delay wins) and drivers apply them to an action.

Quick Start:
    >>> from retrykit import exponential_backoff, limit_retries, cap_delay, recovering, handler
    >>>
    >>> policy = cap_delay(2_000_000, exponential_backoff(50_000)) + limit_retries(8)
    >>> page = recovering(policy, [handler(ConnectionError)], fetch_page)

Result-driven retries (never raise on exhaustion):
    >>> from retrykit import retrying, DEFAULT_POLICY
    >>> job = retrying(DEFAULT_POLICY, lambda n, r: r.status == "pending", poll_job)

Logging handler:
    >>> from retrykit import log_retries, recovering
    >>> recovering(policy, [log_retries(lambda e: isinstance(e, TimeoutError), print)], fetch_page)
    [retry:0] Encountered TimeoutError('read timed out'). Retrying.

Async:
    >>> from retrykit import recovering_async
    >>> page = await recovering_async(policy, [handler(ConnectionError)], fetch_page_async)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Foundation
from .foundation import (
    TRANSIENT_CODES,
    CodedError,
    ErrorCode,
    PolicyError,
    RetryError,
    RetrykitSettings,
    clear_settings_cache,
    get_settings,
)

# Runtime
from .runtime import (
    DEFAULT_POLICY,
    IDENTITY,
    MAX_DELAY,
    Handler,
    HandlerFactory,
    RetryPolicy,
    cap_delay,
    combine,
    configure_logging,
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
    "__version__",
    # Policy
    "RetryPolicy", "IDENTITY", "DEFAULT_POLICY", "MAX_DELAY", "combine", "default_policy", "simulate_policy",
    "limit_retries", "limit_retries_by_delay", "constant_delay", "exponential_backoff", "fibonacci_backoff", "cap_delay",
    # Handlers
    "Handler", "HandlerFactory", "handler", "on_code", "retry_all", "transient", "log_retries",
    # Drivers
    "retrying", "retrying_async", "recovering", "recovering_async", "recover_all", "recover_all_async",
    # Errors
    "ErrorCode", "TRANSIENT_CODES", "RetryError", "PolicyError", "CodedError",
    # Config & logging
    "RetrykitSettings", "get_settings", "clear_settings_cache", "configure_logging",
]
