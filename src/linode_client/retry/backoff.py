"""
Backoff resolution from server pacing hints.
"""

import logging
import re

from .config import RetryPolicy
from .outcome import ExchangeOutcome
from ..exceptions import RetryAfterParseError

logger = logging.getLogger(__name__)

RETRY_AFTER_HEADER = "Retry-After"

_SECONDS = re.compile(r"[0-9]+")


def parse_retry_after(value: str) -> int | None:
    """Parse a Retry-After value as whole ASCII seconds, or None if it is not one."""
    raw = value.strip()
    if not _SECONDS.fullmatch(raw):
        return None
    return int(raw)


def resolve_delay(outcome: ExchangeOutcome, max_wait: float) -> float:
    """
    Read the server's requested wait from the Retry-After header.

    Args:
        outcome: Outcome of the attempt that is about to be retried
        max_wait: Configured ceiling, reported in the log only

    Returns:
        Requested delay in seconds, or 0.0 when the header is missing or empty

    Raises:
        RetryAfterParseError: The header is not a whole number of seconds
    """
    values = outcome.headers.get_list(RETRY_AFTER_HEADER)
    raw = values[0].strip() if values else ""
    if not raw:
        return 0.0

    retry_after = parse_retry_after(raw)
    if retry_after is None:
        raise RetryAfterParseError(values[0], status_code=outcome.status_code or None)

    delay = float(retry_after)
    logger.info(
        f"Respecting Retry-After Header of {retry_after} ({delay:g}s) (max {max_wait:g}s)"
    )
    return delay


def calculate_backoff(outcome: ExchangeOutcome, policy: RetryPolicy) -> float:
    """
    Decide how long to wait before retrying ``outcome``.

    The server's hint wins over ``policy.poll_delay``; either is capped at
    ``policy.max_wait``.
    """
    delay = resolve_delay(outcome, policy.max_wait)
    if delay <= 0:
        delay = policy.poll_delay
    return min(delay, policy.max_wait)
