"""Tests for the Linode client - behavior focused with HTTP mocking."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from linode_client.clients import BaseAPIClient, LinodeClient
from linode_client.exceptions import (
    APIError,
    AuthenticationError,
    MaintenanceModeError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ServiceUnavailableError,
)
from linode_client.retry import RetryPolicy


# --- Helpers ---


def error_body(*reasons: str) -> dict:
    """Create a Linode error payload."""
    return {"errors": [{"reason": reason} for reason in reasons]}


def reply(status_code: int, **kwargs) -> tuple[int, dict]:
    """Describe a response; a fresh httpx.Response is built per request."""
    return status_code, kwargs


class Recorder:
    """Mock handler answering from a script and recording requests.

    The last reply repeats once the script runs out.
    """

    def __init__(self, *replies: tuple[int, dict]):
        self.replies = list(replies)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, kwargs = self.replies[min(len(self.requests), len(self.replies)) - 1]
        return httpx.Response(status_code, **kwargs)


def make_client(recorder: Recorder, policy: RetryPolicy | None = None, **kwargs) -> LinodeClient:
    return LinodeClient(
        token="test-token",
        base_url="https://api.test/v4",
        retry_policy=policy or RetryPolicy(poll_delay=0.0),
        transport=httpx.MockTransport(recorder),
        **kwargs,
    )


# --- Fixtures ---


@pytest.fixture(autouse=True)
def mock_sleep():
    with patch("linode_client.retry.engine.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


# --- Requests ---


class TestLinodeRequests:
    """Test successful request handling."""

    @pytest.mark.asyncio
    async def test_returns_json_on_success(self):
        recorder = Recorder(reply(200, json={"id": 1, "label": "web-1"}))

        async with make_client(recorder) as client:
            result = await client.get("linode/instances/1")

        assert result == {"id": 1, "label": "web-1"}
        assert str(recorder.requests[0].url) == "https://api.test/v4/linode/instances/1"

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self):
        recorder = Recorder(reply(200, json={}))

        async with make_client(recorder) as client:
            await client.get("profile")

        assert recorder.requests[0].headers["Authorization"] == "Bearer test-token"

    @pytest.mark.asyncio
    async def test_sends_json_body(self):
        recorder = Recorder(reply(200, json={"id": 7}))

        async with make_client(recorder) as client:
            await client.post("linode/instances", json={"region": "us-east", "type": "g6-nanode-1"})

        assert recorder.requests[0].method == "POST"
        assert b'"region"' in recorder.requests[0].content

    @pytest.mark.asyncio
    async def test_empty_body_returns_empty_dict(self):
        recorder = Recorder(reply(200))

        async with make_client(recorder) as client:
            result = await client.delete("linode/instances/1")

        assert result == {}

    @pytest.mark.asyncio
    async def test_busy_is_retried_until_success(self, mock_sleep):
        """Given "Linode busy." twice, the call still succeeds."""
        recorder = Recorder(
            reply(400, json=error_body("Linode busy.")),
            reply(400, json=error_body("Linode busy.")),
            reply(200, json={"id": 1}),
        )

        async with make_client(recorder, RetryPolicy(poll_delay=3.0)) as client:
            result = await client.post("linode/instances/1/boot")

        assert result == {"id": 1}
        assert len(recorder.requests) == 3
        assert mock_sleep.await_count == 2


class TestLinodeErrors:
    """Test mapping of final failures to exceptions."""

    @pytest.mark.asyncio
    async def test_raises_not_found_on_404(self):
        recorder = Recorder(reply(404, json=error_body("Not found")))

        async with make_client(recorder) as client:
            with pytest.raises(NotFoundError) as exc_info:
                await client.get("linode/instances/404")

        assert exc_info.value.message == "Not found"
        assert exc_info.value.retries == 0

    @pytest.mark.asyncio
    async def test_raises_authentication_error_on_401(self):
        recorder = Recorder(reply(401, json=error_body("Invalid Token")))

        async with make_client(recorder) as client:
            with pytest.raises(AuthenticationError):
                await client.get("profile")

    @pytest.mark.asyncio
    async def test_raises_plain_api_error_on_other_400(self):
        recorder = Recorder(
            reply(400, json={"errors": [{"reason": "Label too long", "field": "label"}]})
        )

        async with make_client(recorder) as client:
            with pytest.raises(APIError) as exc_info:
                await client.post("linode/instances", json={"label": "x" * 100})

        assert exc_info.value.message == "[label] Label too long"
        assert exc_info.value.errors == [{"reason": "Label too long", "field": "label"}]
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_maintenance_is_final_immediately(self, mock_sleep):
        """503 with the maintenance header is raised on the first attempt."""
        recorder = Recorder(
            reply(
                503,
                headers={"X-Maintenance-Mode": "1"},
                json=error_body("Service unavailable"),
            )
        )

        async with make_client(recorder) as client:
            with pytest.raises(MaintenanceModeError) as exc_info:
                await client.get("regions")

        assert exc_info.value.retryable is False
        assert exc_info.value.retries == 0
        assert len(recorder.requests) == 1
        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exhausted_rate_limit_reports_retries(self):
        """Callers can tell exhausted-after-N from first-attempt failures."""
        recorder = Recorder(
            reply(429, headers={"Retry-After": "4"}, json=error_body("Too many requests"))
        )

        async with make_client(recorder, RetryPolicy(max_retries=2)) as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.get("linode/instances")

        assert exc_info.value.retries == 2
        assert exc_info.value.retry_after == 4.0
        assert len(recorder.requests) == 3

    @pytest.mark.asyncio
    async def test_exhausted_503_raises_service_unavailable(self):
        recorder = Recorder(reply(503, text="unavailable"))

        async with make_client(recorder, RetryPolicy(max_retries=1)) as client:
            with pytest.raises(ServiceUnavailableError) as exc_info:
                await client.get("regions")

        assert exc_info.value.retryable is True
        assert exc_info.value.retries == 1

    @pytest.mark.asyncio
    async def test_raises_server_error_on_500(self):
        recorder = Recorder(reply(500, text="oops"))

        async with make_client(recorder) as client:
            with pytest.raises(ServerError):
                await client.get("regions")

        assert len(recorder.requests) == 1


class TestLinodeConfiguration:
    """Test the retry configuration setters."""

    def test_defaults_to_effectively_unbounded_retries(self):
        client = LinodeClient()
        assert client.retry_policy.max_retries == 1000
        assert client.base_url == "https://api.linode.com/v4"

    def test_setters_replace_policy(self):
        client = LinodeClient()
        original = client.retry_policy

        client.set_retry_count(5)
        client.set_poll_delay(1.5)
        client.set_retry_max_wait_time(12.0)

        assert client.retry_policy.max_retries == 5
        assert client.retry_policy.poll_delay == 1.5
        assert client.retry_policy.max_wait == 12.0
        assert original.max_retries == 1000

    def test_invalid_setting_is_rejected(self):
        with pytest.raises(ValueError):
            LinodeClient().set_retry_count(-1)

    @pytest.mark.asyncio
    async def test_added_retry_condition_applies_to_new_requests(self):
        recorder = Recorder(reply(500, text="oops"), reply(200, json={"ok": True}))
        client = make_client(recorder)

        client.add_retry_condition(lambda outcome: outcome.status_code == 500)
        result = await client.get("regions")
        await client.aclose()

        assert result == {"ok": True}
        assert len(recorder.requests) == 2

    @pytest.mark.asyncio
    async def test_config_change_rebuilds_http_client(self):
        recorder = Recorder(reply(429, json=error_body("Too many requests")))
        client = make_client(recorder, RetryPolicy(max_retries=1))

        with pytest.raises(RateLimitError) as first:
            await client.get("regions")
        client.set_retry_count(0)
        with pytest.raises(RateLimitError) as second:
            await client.get("regions")
        await client.aclose()

        assert first.value.retries == 1
        assert second.value.retries == 0
        assert len(recorder.requests) == 3

    @pytest.mark.asyncio
    async def test_non_ascii_retry_after_is_ignored(self):
        """A final 429 with a non-ASCII digit header still raises RateLimitError."""
        recorder = Recorder(
            reply(429, headers=[(b"Retry-After", b"\xb2")], json=error_body("Too many requests"))
        )

        async with make_client(recorder, RetryPolicy.no_retry()) as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.get("linode/instances")

        assert exc_info.value.retry_after is None
        assert exc_info.value.retries == 0

    def test_base_client_setters_work_without_cached_client(self):
        client = BaseAPIClient("https://api.test/v4/")

        client.set_retry_count(2)
        client.add_retry_condition(lambda outcome: outcome.status_code == 500)

        assert client.base_url == "https://api.test/v4"
        assert client.retry_policy.max_retries == 2
        assert len(client.retry_policy.predicates) == 5
