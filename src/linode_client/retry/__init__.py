"""
Linode Client - Retry Logic.

Pluggable retry predicates, Retry-After aware backoff, and httpx transports
that apply them.
"""

from .outcome import ExchangeOutcome
from .predicates import (
    DEFAULT_RETRY_PREDICATES,
    MAINTENANCE_MODE_HEADER,
    RetryPredicate,
    RetryPredicates,
    linode_busy_retry_condition,
    too_many_requests_retry_condition,
    service_unavailable_retry_condition,
    request_timeout_retry_condition,
)
from .config import RetryPolicy
from .backoff import RETRY_AFTER_HEADER, calculate_backoff, parse_retry_after, resolve_delay
from .engine import RetryHandler, RetryResult
from .transport import AsyncRetryTransport, RetryTransport

__all__ = [
    "ExchangeOutcome",
    "DEFAULT_RETRY_PREDICATES",
    "MAINTENANCE_MODE_HEADER",
    "RetryPredicate",
    "RetryPredicates",
    "linode_busy_retry_condition",
    "too_many_requests_retry_condition",
    "service_unavailable_retry_condition",
    "request_timeout_retry_condition",
    "RetryPolicy",
    "RETRY_AFTER_HEADER",
    "calculate_backoff",
    "parse_retry_after",
    "resolve_delay",
    "RetryHandler",
    "RetryResult",
    "AsyncRetryTransport",
    "RetryTransport",
]
