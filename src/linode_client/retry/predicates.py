"""
Retry predicates and the ordered registry that combines them.

A predicate looks at one ExchangeOutcome and answers "retry" (True) or
"no opinion" (False). The registry ORs them in registration order.
"""

import logging
from typing import Iterator, Protocol

from .outcome import ExchangeOutcome

logger = logging.getLogger(__name__)

MAINTENANCE_MODE_HEADER = "X-Maintenance-Mode"
LINODE_BUSY_MESSAGE = "Linode busy."


class RetryPredicate(Protocol):
    """Anything callable as ``predicate(outcome) -> bool``."""

    def __call__(self, outcome: ExchangeOutcome) -> bool: ...


def linode_busy_retry_condition(outcome: ExchangeOutcome) -> bool:
    """Retry 400s whose error message is exactly "Linode busy."."""
    # Exact match only; a reworded server message disables this predicate.
    busy = outcome.error is not None and outcome.error.message == LINODE_BUSY_MESSAGE
    return outcome.status_code == 400 and busy


def too_many_requests_retry_condition(outcome: ExchangeOutcome) -> bool:
    """Always retry 429 Too Many Requests."""
    return outcome.status_code == 429


def service_unavailable_retry_condition(outcome: ExchangeOutcome) -> bool:
    """Retry 503s, unless the API flags a maintenance window."""
    if outcome.status_code != 503:
        return False

    # Announced maintenance also answers 503, with an extra header.
    if outcome.headers.get(MAINTENANCE_MODE_HEADER):
        logger.info("Linode API is under maintenance, request will not be retried")
        return False

    return True


def request_timeout_retry_condition(outcome: ExchangeOutcome) -> bool:
    """Always retry 408 Request Timeout."""
    return outcome.status_code == 408


DEFAULT_RETRY_PREDICATES: tuple[RetryPredicate, ...] = (
    linode_busy_retry_condition,
    too_many_requests_retry_condition,
    service_unavailable_retry_condition,
    request_timeout_retry_condition,
)


class RetryPredicates:
    """
    Immutable, ordered collection of retry predicates.

    Extra predicates are added with ``register``, which returns a new
    registry and leaves the built-ins untouched.
    """

    __slots__ = ("_predicates",)

    def __init__(self, predicates: tuple[RetryPredicate, ...] = DEFAULT_RETRY_PREDICATES):
        self._predicates = tuple(predicates)

    def register(self, *predicates: RetryPredicate) -> "RetryPredicates":
        """Return a registry with ``predicates`` appended after the current ones."""
        return RetryPredicates(self._predicates + predicates)

    def should_retry(self, outcome: ExchangeOutcome) -> bool:
        """True as soon as one predicate asks for a retry."""
        for predicate in self._predicates:
            if predicate(outcome):
                logger.info(f"Received error {outcome.error_message} - Retrying")
                return True
        return False

    def __iter__(self) -> Iterator[RetryPredicate]:
        return iter(self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RetryPredicates):
            return NotImplemented
        return self._predicates == other._predicates

    def __hash__(self) -> int:
        return hash(self._predicates)

    def __repr__(self) -> str:
        names = ", ".join(getattr(p, "__name__", repr(p)) for p in self._predicates)
        return f"RetryPredicates([{names}])"
