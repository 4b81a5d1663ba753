"""Error handling for retrykit.

- ErrorCode: Tags for code-classified failures
- RetryError: Base of the package's own exceptions
- PolicyError: Invalid policy construction
- CodedError: User-raisable tagged failure
"""

from .errors import TRANSIENT_CODES, CodedError, ErrorCode, PolicyError, RetryError

__all__ = ["ErrorCode", "TRANSIENT_CODES", "RetryError", "PolicyError", "CodedError"]
