"""
httpx transports that retry requests according to a RetryPolicy.

Mount them on an ``httpx.Client`` / ``httpx.AsyncClient`` to give every
request the retry behavior without touching request construction:

    >>> transport = AsyncRetryTransport(policy=RetryPolicy(max_retries=5))
    >>> client = httpx.AsyncClient(transport=transport)
"""

import threading

import httpx

from .config import RetryPolicy
from .engine import RetryHandler, RetryResult


def _annotate(result: RetryResult) -> httpx.Response:
    response = result.response
    response.extensions["retries"] = result.retries
    response.extensions["retries_exhausted"] = result.exhausted
    return response


class RetryTransport(httpx.BaseTransport):
    """Synchronous transport wrapper adding retries.

    Setting ``cancel`` aborts any pending retry wait with RetryCancelledError.
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        policy: RetryPolicy | None = None,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ):
        self.transport = transport or httpx.HTTPTransport()
        self.handler = RetryHandler(policy)
        self.deadline = deadline
        self.cancel = cancel

    @property
    def policy(self) -> RetryPolicy:
        return self.handler.policy

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        result = self.handler.execute_sync(
            self.transport.handle_request, request, deadline=self.deadline, cancel=self.cancel
        )
        return _annotate(result)

    def close(self) -> None:
        self.transport.close()


class AsyncRetryTransport(httpx.AsyncBaseTransport):
    """Asynchronous transport wrapper adding retries."""

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        policy: RetryPolicy | None = None,
        deadline: float | None = None,
    ):
        self.transport = transport or httpx.AsyncHTTPTransport()
        self.handler = RetryHandler(policy)
        self.deadline = deadline

    @property
    def policy(self) -> RetryPolicy:
        return self.handler.policy

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        result = await self.handler.execute(
            self.transport.handle_async_request, request, deadline=self.deadline
        )
        return _annotate(result)

    async def aclose(self) -> None:
        await self.transport.aclose()
