"""Retry policies and drivers.

Policies are pure functions from attempt index to delay (microseconds) or
stop, composed with `+`. Drivers apply a policy to an action.

Example:
    >>> from retrykit.runtime.retry import exponential_backoff, limit_retries, recovering, handler
    >>>
    >>> policy = exponential_backoff(50_000) + limit_retries(5)
    >>> recovering(policy, [handler(ConnectionError)], fetch_page)
"""

from .drivers import (
    recover_all,
    recover_all_async,
    recovering,
    recovering_async,
    retrying,
    retrying_async,
)
from .handlers import Handler, HandlerFactory, handler, log_retries, on_code, retry_all, transient
from .policy import (
    DEFAULT_POLICY,
    IDENTITY,
    MAX_DELAY,
    RetryPolicy,
    cap_delay,
    combine,
    constant_delay,
    default_policy,
    exponential_backoff,
    fibonacci_backoff,
    limit_retries,
    limit_retries_by_delay,
    simulate_policy,
)

__all__ = [
    # Policy
    "RetryPolicy",
    "IDENTITY",
    "DEFAULT_POLICY",
    "MAX_DELAY",
    "combine",
    "default_policy",
    "simulate_policy",
    # Combinators
    "limit_retries",
    "limit_retries_by_delay",
    "constant_delay",
    "exponential_backoff",
    "fibonacci_backoff",
    "cap_delay",
    # Handlers
    "Handler",
    "HandlerFactory",
    "handler",
    "on_code",
    "retry_all",
    "transient",
    "log_retries",
    # Drivers
    "retrying",
    "retrying_async",
    "recovering",
    "recovering_async",
    "recover_all",
    "recover_all_async",
]
