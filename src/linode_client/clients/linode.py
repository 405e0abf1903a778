"""
Linode API v4 client.

Thin async JSON client: every request goes through an AsyncRetryTransport,
so busy, rate limited, unavailable and timed out requests are retried
according to the client's RetryPolicy.
"""

import logging

import httpx

from .base import BaseAPIClient
from ..exceptions import (
    APIError,
    AuthenticationError,
    MaintenanceModeError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ServiceUnavailableError,
)
from ..retry import (
    MAINTENANCE_MODE_HEADER,
    RETRY_AFTER_HEADER,
    AsyncRetryTransport,
    ExchangeOutcome,
    RetryPolicy,
    parse_retry_after,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.linode.com/v4"
DEFAULT_USER_AGENT = "linode-client-python/0.1.0"


class LinodeClient(BaseAPIClient):
    """
    Client for the Linode REST API.

    Features:
    - Retries "Linode busy." 400s, 408, 429 and non-maintenance 503s
    - Honors Retry-After, falling back to the poll delay
    - Maps final failures to typed exceptions carrying the retry count
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 60.0,
        deadline: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """
        Initialize Linode client.

        Args:
            token: Personal access token, sent as a Bearer token
            base_url: API base URL
            retry_policy: Retry configuration
            timeout: Per-attempt request timeout in seconds
            deadline: Optional total time budget per request, retries included
            transport: Inner transport the retries wrap (default: real HTTP)
            user_agent: User-Agent header value
        """
        super().__init__(base_url, retry_policy, timeout)
        self.token = token
        self.deadline = deadline
        self.user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._retired: list[httpx.AsyncClient] = []

    def _get_headers(self) -> dict:
        """Get headers for Linode API requests."""
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _reset_http_client(self) -> None:
        if self._client is not None:
            self._retired.append(self._client)
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            transport = AsyncRetryTransport(
                transport=self._transport or httpx.AsyncHTTPTransport(),
                policy=self.retry_policy,
                deadline=self.deadline,
            )
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._get_headers(),
                timeout=self.timeout,
                transport=transport,
            )
        return self._client

    def _handle_error(self, response: httpx.Response) -> None:
        """Convert a final non-2xx response to a domain exception."""
        status_code = response.status_code
        if status_code < 400:
            return

        outcome = ExchangeOutcome.from_response(response)
        retries = response.extensions.get("retries", 0)
        kwargs = {
            "errors": outcome.error.errors if outcome.error else [],
            "status_code": status_code,
            "retries": retries,
        }
        message = outcome.error.message if outcome.error else None
        if not message:
            message = response.reason_phrase or f"HTTP {status_code}"

        if retries:
            logger.error(f"Request failed after {retries} retries: {message} (status {status_code})")

        if status_code in (401, 403):
            raise AuthenticationError(message, **kwargs)
        elif status_code == 404:
            raise NotFoundError(message, **kwargs)
        elif status_code == 429:
            retry_after = parse_retry_after(response.headers.get(RETRY_AFTER_HEADER, ""))
            raise RateLimitError(
                message,
                retry_after=float(retry_after) if retry_after is not None else None,
                **kwargs,
            )
        elif status_code == 503:
            if response.headers.get(MAINTENANCE_MODE_HEADER):
                raise MaintenanceModeError(message, **kwargs)
            raise ServiceUnavailableError(message, **kwargs)
        elif status_code >= 500:
            raise ServerError(message, **kwargs)
        raise APIError(message, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict | None = None,
        params: dict | None = None,
    ) -> dict:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the base URL (e.g. "linode/instances")
            json: Optional JSON body
            params: Optional query parameters

        Returns:
            Decoded JSON body ({} for empty responses)

        Raises:
            APIError: The final response was not successful
            RetryAfterParseError: The server sent a malformed Retry-After header
            DeadlineExceededError: The deadline elapsed while waiting to retry
        """
        client = self._get_client()
        response = await client.request(
            method, "/" + path.lstrip("/"), json=json, params=params
        )
        self._handle_error(response)
        if not response.content:
            return {}
        return response.json()

    async def get(self, path: str, params: dict | None = None) -> dict:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: dict | None = None) -> dict:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: dict | None = None) -> dict:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> dict:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        """Close the HTTP client and any client retired by a config change."""
        clients = self._retired + ([self._client] if self._client else [])
        self._retired = []
        self._client = None
        for client in clients:
            await client.aclose()

    async def __aenter__(self) -> "LinodeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
