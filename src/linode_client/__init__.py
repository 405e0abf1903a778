"""
Linode Client - Retrying HTTP client for the Linode API.

Retry predicates, Retry-After aware backoff and an httpx-based client built on them.
"""

from .clients import BaseAPIClient, LinodeClient
from .exceptions import (
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
from .retry import (
    AsyncRetryTransport,
    ExchangeOutcome,
    RetryHandler,
    RetryPolicy,
    RetryPredicate,
    RetryPredicates,
    RetryResult,
    RetryTransport,
    calculate_backoff,
    resolve_delay,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Clients
    "BaseAPIClient",
    "LinodeClient",
    # Exceptions
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
    # Retry
    "AsyncRetryTransport",
    "ExchangeOutcome",
    "RetryHandler",
    "RetryPolicy",
    "RetryPredicate",
    "RetryPredicates",
    "RetryResult",
    "RetryTransport",
    "calculate_backoff",
    "resolve_delay",
]
