"""
In-Memory Cache Exceptions

Exceptions for the process-local cache store.
Misses are never errors; these cover misconfiguration and lifecycle misuse.
Exceptions raised by caller-supplied factories are never wrapped.
"""

from typing import Optional, Any, Dict


class CacheException(Exception):
    """Base exception for cache store errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class CacheConfigurationException(CacheException):
    """Raised when cache store configuration is invalid."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value is not None:
            details["config_value"] = str(config_value)

        super().__init__(
            message=message, error_code="CACHE_CONFIGURATION_ERROR", details=details
        )


class CacheClosedException(CacheException):
    """Raised when a closed cache store is asked to start its sweep again."""

    def __init__(self, message: str = "Cache store has been closed"):
        super().__init__(
            message=message,
            error_code="CACHE_CLOSED",
            details={"store_status": "closed"},
        )
