"""Exception handlers for the recovering driver.

A HandlerFactory takes the iteration index and returns a Handler. A Handler
declares which exceptions it matches (by class, optionally narrowed to an
ErrorCode tag) and decides whether a matched exception should be retried.

`recovering` scans handlers in order and the first match decides alone,
even when it declines to retry.

Example:
    >>> handlers = [
    ...     handler(PermissionError, lambda e: False),
    ...     on_code(ErrorCode.RATE_LIMITED),
    ...     log_retries(lambda e: isinstance(e, TimeoutError), logger.warning),
    ... ]
    >>> recovering(DEFAULT_POLICY, handlers, fetch_page)
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Callable, TypeAlias

from retrykit.foundation.errors import CodedError, ErrorCode

logger = logging.getLogger("retrykit.retry")

ExceptionKind: TypeAlias = "type[BaseException] | tuple[type[BaseException], ...]"
Decision: TypeAlias = Callable[[BaseException], "bool | Awaitable[bool]"]


@dataclass(frozen=True, slots=True)
class Handler:
    """Exception matcher plus retry decision for one iteration.

    Attributes:
        kind: Exception class (or tuple of classes) this handler matches
        decide: Called with the matched exception; True means retry.
            May return an awaitable when used with `recovering_async`.
        code: Optional ErrorCode tag; when set, only CodedError with this code matches
    """

    kind: ExceptionKind
    decide: Decision
    code: ErrorCode | None = None

    def matches(self, exc: BaseException) -> bool:
        if not isinstance(exc, self.kind):
            return False
        return self.code is None or (isinstance(exc, CodedError) and exc.code == self.code)


HandlerFactory: TypeAlias = Callable[[int], Handler]


def _always(_: BaseException) -> bool:
    return True


def handler(kind: ExceptionKind, decide: Decision = _always) -> HandlerFactory:
    """Factory for a handler that ignores the iteration index."""
    h = Handler(kind, decide)
    return lambda _n: h


def _recoverable(exc: BaseException) -> bool:
    return getattr(exc, "recoverable", True)


def on_code(code: ErrorCode | str, decide: Decision = _recoverable) -> HandlerFactory:
    """Match CodedError carrying `code`. By default retries when the error is recoverable."""
    h = Handler(CodedError, decide, ErrorCode(code))
    return lambda _n: h


# Any CodedError, retried while recoverable (TRANSIENT_CODES unless set explicitly)
transient: HandlerFactory = handler(CodedError, _recoverable)

# Matches every Exception and always retries (used by recover_all)
retry_all: HandlerFactory = handler(Exception)


def _format_message(n: int, exc: BaseException, retrying: bool) -> str:
    return f"[retry:{n}] Encountered {exc!r}. {'Retrying.' if retrying else 'Crashing.'}"


def log_retries(
    should_retry: Callable[[BaseException], bool | Awaitable[bool]],
    report: Callable[[str], object] | None = None,
    kind: ExceptionKind = Exception,
) -> HandlerFactory:
    """Build a handler that reports each decision before returning it.

    Message format: ``[retry:<n>] Encountered <exc!r>. Retrying.`` (or
    ``Crashing.`` when `should_retry` says no). The verdict is passed through
    unchanged.

    Args:
        should_retry: Test for whether the exception is retried
        report: Sink for the message (default: WARNING on ``retrykit.retry``)
        kind: Exception class(es) the handler matches

    If either callable is a coroutine function, the handler's decision is
    async and must be used with `recovering_async`.
    """
    sink = report or logger.warning
    is_async = inspect.iscoroutinefunction(should_retry) or inspect.iscoroutinefunction(sink)

    def factory(n: int) -> Handler:
        def decide(exc: BaseException) -> bool:
            res = should_retry(exc)
            sink(_format_message(n, exc, res))  # type: ignore[arg-type]
            return res  # type: ignore[return-value]

        async def decide_async(exc: BaseException) -> bool:
            res = should_retry(exc)
            if inspect.isawaitable(res):
                res = await res
            out = sink(_format_message(n, exc, res))
            if inspect.isawaitable(out):
                await out
            return res

        return Handler(kind, decide_async if is_async else decide)

    return factory
