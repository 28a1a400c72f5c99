"""
Custom exception classes for the sports proxy.

This module defines the hierarchy of exceptions raised while parsing
requests, looking up tools, talking to the remote command backend and
reaching the cache tiers. Per-call errors are captured by the pipeline,
only ``RequestValidationError`` is meant to reach the caller.
"""

from typing import Optional


class SportsProxyError(Exception):
    """Base exception for all proxy errors."""

    pass


class ToolNotFoundError(SportsProxyError):
    """Raised when a requested tool has no entry in the registry."""

    pass


class ToolRegistrationError(SportsProxyError):
    """Raised when a tool cannot be added to the registry."""

    pass


class ToolValidationError(SportsProxyError):
    """Raised when a declared tool definition or its schema is unusable."""

    pass


class RemoteServiceError(SportsProxyError):
    """Raised on transport failures, non-2xx answers, timeouts or malformed payloads."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteApplicationError(SportsProxyError):
    """Raised when the backend answers with an application level ``error``."""

    pass


class TierUnavailable(SportsProxyError):
    """Raised by a cache tier adapter that cannot be reached."""

    pass


class RequestValidationError(SportsProxyError):
    """Raised when an inbound request body cannot be parsed."""

    pass
