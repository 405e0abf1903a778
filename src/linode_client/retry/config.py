"""
Retry policy configuration.
"""

from dataclasses import dataclass, field, replace

from .outcome import ExchangeOutcome
from .predicates import RetryPredicate, RetryPredicates


@dataclass(frozen=True)
class RetryPolicy:
    """
    Per-client retry configuration. Immutable, safe to share across requests.

    Attributes:
        max_retries: Maximum number of retries after the first attempt (default: 1000)
        poll_delay: Delay in seconds when the server sends no Retry-After (default: 3.0)
        max_wait: Ceiling in seconds for any single wait (default: 30.0)
        predicates: Ordered retry predicates (default: the built-in four)
        retry_transport_errors: Retry attempts that raised before a response (default: True)
    """

    max_retries: int = 1000
    poll_delay: float = 3.0
    max_wait: float = 30.0
    predicates: RetryPredicates = field(default_factory=RetryPredicates)
    retry_transport_errors: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.poll_delay < 0:
            raise ValueError(f"poll_delay must be >= 0, got {self.poll_delay}")
        if self.max_wait < 0:
            raise ValueError(f"max_wait must be >= 0, got {self.max_wait}")

    def should_retry(self, outcome: ExchangeOutcome) -> bool:
        """Check if any configured predicate asks to retry this outcome."""
        return self.predicates.should_retry(outcome)

    def with_predicates(self, *predicates: RetryPredicate) -> "RetryPolicy":
        """Return a copy of this policy with extra predicates appended."""
        return replace(self, predicates=self.predicates.register(*predicates))

    @classmethod
    def conservative(cls) -> "RetryPolicy":
        """Preset for bounded latency (few retries, short waits)."""
        return cls(
            max_retries=3,
            poll_delay=1.0,
            max_wait=10.0,
        )

    @classmethod
    def no_retry(cls) -> "RetryPolicy":
        """Preset for no retry (single attempt only)."""
        return cls(max_retries=0)
