"""
Exception classes for the WooCommerce API Python client
"""

from typing import Optional, Dict, Any


class WCClientError(Exception):
    """Base exception for all WooCommerce API client errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class PreconditionError(WCClientError):
    """Exception raised for malformed construction inputs (credentials, URLs, methods)"""
    pass


# The name used across the rest of the package for input validation failures
ValidationError = PreconditionError


class TransportError(WCClientError):
    """
    Failure of the underlying HTTP exchange.

    Never raised out of an API call; it is attached to the returned response
    so the caller can inspect a structured result either way.
    """

    def __init__(self, message: str, error_code: str = "REQUEST_FAILED",
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status

    @property
    def is_timeout(self) -> bool:
        return self.error_code == "TIMEOUT"


class DecodeError(WCClientError):
    """Response body could not be decoded as JSON; the raw body is kept"""

    def __init__(self, message: str, error_code: str = "INVALID_JSON",
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status
