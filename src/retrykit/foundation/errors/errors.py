"""Error types for retry policies and drivers.

Provides error codes for tagged failures and the package's exception hierarchy.
Drivers never wrap user exceptions in these types; they exist for policy
construction errors and for callers that want code-tagged failures.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Standard codes for tagged failures.

    Used by `on_code` handlers for type-discriminated dispatch.
    """
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_PARAMS = "INVALID_PARAMS"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"


# Transient errors that may succeed on retry
TRANSIENT_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.RATE_LIMITED,
    ErrorCode.TIMEOUT,
    ErrorCode.NETWORK_ERROR,
})


class RetryError(Exception):
    """Base class for errors raised by retrykit itself."""


class PolicyError(RetryError, ValueError):
    """Invalid argument passed to a policy combinator."""


class CodedError(RetryError):
    """Failure tagged with an ErrorCode.

    Raise from an action to get code-based matching in `recovering`:

        >>> raise CodedError(ErrorCode.RATE_LIMITED, "429 from upstream")

    Attributes:
        code: Machine-readable classification
        message: Human-readable description
        recoverable: Whether a retry might succeed (defaults from TRANSIENT_CODES)
    """

    __slots__ = ("code", "message", "recoverable")

    def __init__(self, code: ErrorCode | str, message: str = "", *, recoverable: bool | None = None) -> None:
        self.code = ErrorCode(code)
        self.message = message or self.code.value
        self.recoverable = self.code in TRANSIENT_CODES if recoverable is None else recoverable
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"CodedError({self.code.value}, {self.message!r})"
