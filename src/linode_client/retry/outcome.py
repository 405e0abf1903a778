"""
Exchange outcomes: the read-only view of one physical HTTP attempt.
"""

from dataclasses import dataclass, field

import httpx

from ..exceptions import APIError

NO_ERROR_MESSAGE = "<no error message>"


@dataclass(frozen=True)
class ExchangeOutcome:
    """
    Result of a single HTTP attempt, as seen by retry predicates.

    Attributes:
        status_code: HTTP status code (0 when the attempt raised before a response)
        headers: Case-insensitive, multi-valued response headers
        error: Decoded Linode error payload, if the response carried one
        transport_error: Exception raised by the transport, if any
    """

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    error: APIError | None = None
    transport_error: httpx.TransportError | None = None

    @property
    def error_message(self) -> str:
        """Decoded error message, or a placeholder when there is none."""
        if self.error is not None and self.error.message:
            return self.error.message
        if self.transport_error is not None:
            return str(self.transport_error) or type(self.transport_error).__name__
        return NO_ERROR_MESSAGE

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ExchangeOutcome":
        """
        Build an outcome from a response whose body has already been read.

        Error bodies that are not valid Linode error JSON decode to ``error=None``.
        """
        error = None
        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            error = APIError.from_payload(payload, status_code=response.status_code)
        return cls(
            status_code=response.status_code,
            headers=response.headers,
            error=error,
        )

    @classmethod
    def from_exception(cls, exc: httpx.TransportError) -> "ExchangeOutcome":
        """Build an outcome for an attempt that never produced a response."""
        return cls(status_code=0, transport_error=exc)
