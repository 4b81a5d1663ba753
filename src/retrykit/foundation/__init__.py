"""Foundation layer: configuration and error types."""

from .config import LoggingSettings, RetrykitSettings, RetrySettings, clear_settings_cache, get_settings
from .errors import TRANSIENT_CODES, CodedError, ErrorCode, PolicyError, RetryError

__all__ = [
    # Config
    "LoggingSettings", "RetrySettings", "RetrykitSettings", "get_settings", "clear_settings_cache",
    # Errors
    "ErrorCode", "TRANSIENT_CODES", "RetryError", "PolicyError", "CodedError",
]
