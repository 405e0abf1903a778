"""
Linode Client - Exception Hierarchy.

Custom exceptions for Linode API operations with retry-awareness.
"""

from .base import (
    LinodeClientError,
    APIError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    MaintenanceModeError,
    ServerError,
    RetryAfterParseError,
    DeadlineExceededError,
    RetryCancelledError,
)

__all__ = [
    "LinodeClientError",
    "APIError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "ServiceUnavailableError",
    "MaintenanceModeError",
    "ServerError",
    "RetryAfterParseError",
    "DeadlineExceededError",
    "RetryCancelledError",
]
