"""
Base exception classes for Linode API client operations.

Each exception includes a `retryable` flag indicating whether the operation
could succeed if issued again later with the same parameters.
"""


class LinodeClientError(Exception):
    """Base exception for all Linode client errors."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.retryable = retryable
        self.status_code = status_code

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        return " ".join(parts)


class APIError(LinodeClientError):
    """
    Error payload returned by the Linode API.

    The API answers failed requests with ``{"errors": [{"reason": ..., "field": ...}]}``.
    The message joins every reason with ``"; "``, prefixing the field when present.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: list[dict] | None = None,
        retries: int = 0,
        **kwargs,
    ):
        self.errors = errors or []
        if message is None:
            message = self.format_errors(self.errors)
        super().__init__(message, **kwargs)
        self.retries = retries

    @staticmethod
    def format_errors(errors: list[dict]) -> str:
        """Render decoded API errors as a single message."""
        reasons = []
        for error in errors:
            reason = str(error.get("reason", ""))
            field = error.get("field")
            reasons.append(f"[{field}] {reason}" if field else reason)
        return "; ".join(reasons)

    @classmethod
    def from_payload(cls, payload: object, **kwargs) -> "APIError | None":
        """Decode a JSON error body, returning None when it is not an API error."""
        if not isinstance(payload, dict):
            return None
        errors = payload.get("errors")
        if not isinstance(errors, list):
            return None
        errors = [e for e in errors if isinstance(e, dict)]
        if not errors:
            return None
        return cls(errors=errors, **kwargs)


class AuthenticationError(APIError):
    """Raised on 401/403. Not retryable."""

    def __init__(self, message: str | None = None, **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class NotFoundError(APIError):
    """Raised when the requested resource does not exist. Not retryable."""

    def __init__(self, message: str | None = None, **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class RateLimitError(APIError):
    """Raised when the rate limit is still exceeded after retrying. Retryable."""

    def __init__(
        self,
        message: str | None = None,
        *,
        retry_after: float | None = None,
        **kwargs,
    ):
        super().__init__(message, retryable=True, **kwargs)
        self.retry_after = retry_after


class ServiceUnavailableError(APIError):
    """Raised when the API keeps answering 503. Usually retryable."""

    def __init__(self, message: str | None = None, *, retryable: bool = True, **kwargs):
        super().__init__(message, retryable=retryable, **kwargs)


class MaintenanceModeError(ServiceUnavailableError):
    """Raised on a 503 carrying the maintenance marker. Not retryable."""

    def __init__(self, message: str | None = None, **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class ServerError(APIError):
    """Raised when the server returns any other 5xx error. Usually retryable."""

    def __init__(self, message: str | None = None, **kwargs):
        super().__init__(message, retryable=True, **kwargs)


class RetryAfterParseError(LinodeClientError):
    """Raised when a Retry-After header cannot be read as whole seconds."""

    def __init__(self, header_value: str, **kwargs):
        super().__init__(f"Invalid Retry-After header: {header_value!r}", **kwargs)
        self.header_value = header_value


class DeadlineExceededError(LinodeClientError):
    """Raised when the request deadline elapses while waiting to retry."""

    def __init__(self, message: str = "Request deadline exceeded", *, retries: int = 0, **kwargs):
        super().__init__(message, retryable=False, **kwargs)
        self.retries = retries


class RetryCancelledError(LinodeClientError):
    """Raised when a blocking retry wait is cancelled by the caller."""

    def __init__(self, message: str = "Retry cancelled", *, retries: int = 0, **kwargs):
        super().__init__(message, retryable=False, **kwargs)
        self.retries = retries
