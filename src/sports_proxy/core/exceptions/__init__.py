"""Export the exception hierarchy used across extraction, execution and caching."""

from .exceptions import (
    SportsProxyError,
    ToolNotFoundError,
    ToolRegistrationError,
    ToolValidationError,
    RemoteServiceError,
    RemoteApplicationError,
    TierUnavailable,
    RequestValidationError,
)

__all__ = [
    "SportsProxyError",
    "ToolNotFoundError",
    "ToolRegistrationError",
    "ToolValidationError",
    "RemoteServiceError",
    "RemoteApplicationError",
    "TierUnavailable",
    "RequestValidationError",
]
