"""
Base API client.

Holds the retry configuration shared by every request a client issues and
exposes the setters used to tune it at initialization time.
"""

from dataclasses import replace

from ..retry import RetryPolicy, RetryPredicate


class BaseAPIClient:
    """
    Common configuration for HTTP API clients.

    The retry policy is immutable; the setters swap in a new policy and
    reset the underlying HTTP client so in-flight requests keep the old one.
    """

    def __init__(
        self,
        base_url: str,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 60.0,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root URL
            retry_policy: Retry configuration for failed requests
            timeout: Per-attempt request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout

    def _reset_http_client(self) -> None:
        """Drop any cached HTTP client built from the previous policy."""
        # No-op here; clients that cache an HTTP client override this.

    def _update_policy(self, **changes) -> None:
        self.retry_policy = replace(self.retry_policy, **changes)
        self._reset_http_client()

    def set_retry_count(self, count: int) -> None:
        """Set the maximum number of retries per request."""
        self._update_policy(max_retries=count)

    def set_poll_delay(self, seconds: float) -> None:
        """Set the wait used when the server sends no Retry-After header."""
        self._update_policy(poll_delay=seconds)

    def set_retry_max_wait_time(self, seconds: float) -> None:
        """Set the ceiling for a single retry wait."""
        self._update_policy(max_wait=seconds)

    def add_retry_condition(self, predicate: RetryPredicate) -> None:
        """Append a retry predicate after the built-in ones."""
        self.retry_policy = self.retry_policy.with_predicates(predicate)
        self._reset_http_client()
