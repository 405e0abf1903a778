"""
Retry orchestration around an HTTP exchange primitive.

The primitive is any callable that sends an ``httpx.Request`` and returns an
``httpx.Response`` (raising ``httpx.TransportError`` when no response arrives).
``RetryHandler`` runs it until the outcome is final, waiting between attempts
as decided by the backoff resolver.
"""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from .backoff import calculate_backoff
from .config import RetryPolicy
from .outcome import ExchangeOutcome
from ..exceptions import DeadlineExceededError, RetryCancelledError

logger = logging.getLogger(__name__)

Send = Callable[[httpx.Request], httpx.Response]
AsyncSend = Callable[[httpx.Request], Awaitable[httpx.Response]]


@dataclass(frozen=True)
class RetryResult:
    """
    Final result of one logical request.

    Attributes:
        outcome: Outcome of the last attempt
        response: Response of the last attempt (None only for transport errors)
        retries: Number of retries performed (attempts - 1)
        exhausted: True when retries ran out with the last outcome still retryable
            (never set when the policy allows no retries)
    """

    outcome: ExchangeOutcome
    response: httpx.Response | None
    retries: int
    exhausted: bool = False


class RetryHandler:
    """
    Runs a logical request through the exchange primitive with retries.

    The handler keeps no per-request state, so one instance can serve any
    number of concurrent requests.
    """

    def __init__(self, policy: RetryPolicy | None = None):
        self.policy = policy or RetryPolicy()

    def _is_retryable(self, outcome: ExchangeOutcome) -> bool:
        if outcome.transport_error is not None:
            return self.policy.retry_transport_errors
        return self.policy.should_retry(outcome)

    def _finish(
        self,
        outcome: ExchangeOutcome,
        response: httpx.Response | None,
        retries: int,
        exhausted: bool,
    ) -> RetryResult:
        if exhausted:
            logger.warning(
                f"All {self.policy.max_retries} retries exhausted: {outcome.error_message}"
            )
        if outcome.transport_error is not None:
            raise outcome.transport_error
        return RetryResult(outcome, response, retries, exhausted)

    async def _attempt(
        self, send: AsyncSend, request: httpx.Request
    ) -> tuple[httpx.Response | None, ExchangeOutcome]:
        """Run one attempt; a failure while reading an error body counts as a transport error."""
        response = None
        try:
            response = await send(request)
            if response.status_code >= 400:
                await response.aread()
        except httpx.TransportError as e:
            if response is not None:
                await response.aclose()
            return None, ExchangeOutcome.from_exception(e)
        return response, ExchangeOutcome.from_response(response)

    def _attempt_sync(
        self, send: Send, request: httpx.Request
    ) -> tuple[httpx.Response | None, ExchangeOutcome]:
        response = None
        try:
            response = send(request)
            if response.status_code >= 400:
                response.read()
        except httpx.TransportError as e:
            if response is not None:
                response.close()
            return None, ExchangeOutcome.from_exception(e)
        return response, ExchangeOutcome.from_response(response)

    def _log_retry(self, outcome: ExchangeOutcome, retries: int, delay: float) -> None:
        logger.debug(
            f"Retry {retries + 1}/{self.policy.max_retries}: {outcome.error_message}, "
            f"waiting {delay:.1f}s"
        )

    async def execute(
        self,
        send: AsyncSend,
        request: httpx.Request,
        *,
        deadline: float | None = None,
    ) -> RetryResult:
        """
        Send ``request`` until the outcome is final.

        Args:
            send: Async exchange primitive
            request: Request to send (re-sent unchanged on retry)
            deadline: Optional total time budget in seconds for all attempts

        Returns:
            RetryResult for the last attempt

        Raises:
            RetryAfterParseError: The server sent a malformed Retry-After header
            DeadlineExceededError: The deadline elapsed while waiting to retry
            httpx.TransportError: The last attempt failed without a response
        """
        loop = asyncio.get_running_loop()
        expires_at = None if deadline is None else loop.time() + deadline
        retries = 0

        while True:
            response, outcome = await self._attempt(send, request)

            if not self._is_retryable(outcome):
                return self._finish(outcome, response, retries, exhausted=False)
            if retries >= self.policy.max_retries:
                return self._finish(outcome, response, retries, exhausted=retries > 0)

            if response is not None:
                await response.aclose()
            delay = calculate_backoff(outcome, self.policy)

            if expires_at is not None:
                remaining = expires_at - loop.time()
                if delay >= remaining:
                    await asyncio.sleep(max(remaining, 0.0))
                    raise DeadlineExceededError(retries=retries)

            self._log_retry(outcome, retries, delay)
            await asyncio.sleep(delay)
            retries += 1

    def execute_sync(
        self,
        send: Send,
        request: httpx.Request,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> RetryResult:
        """
        Blocking variant of ``execute``.

        Args:
            send: Exchange primitive
            request: Request to send (re-sent unchanged on retry)
            deadline: Optional total time budget in seconds for all attempts
            cancel: Optional event; setting it aborts a pending retry wait

        Raises:
            RetryAfterParseError: The server sent a malformed Retry-After header
            DeadlineExceededError: The deadline elapsed while waiting to retry
            RetryCancelledError: ``cancel`` was set while waiting to retry
            httpx.TransportError: The last attempt failed without a response
        """
        expires_at = None if deadline is None else time.monotonic() + deadline
        retries = 0

        while True:
            response, outcome = self._attempt_sync(send, request)

            if not self._is_retryable(outcome):
                return self._finish(outcome, response, retries, exhausted=False)
            if retries >= self.policy.max_retries:
                return self._finish(outcome, response, retries, exhausted=retries > 0)

            if response is not None:
                response.close()
            delay = calculate_backoff(outcome, self.policy)

            timed_out = False
            if expires_at is not None:
                remaining = expires_at - time.monotonic()
                if delay >= remaining:
                    delay = max(remaining, 0.0)
                    timed_out = True

            if not timed_out:
                self._log_retry(outcome, retries, delay)
            if cancel is not None:
                if cancel.wait(delay):
                    raise RetryCancelledError(retries=retries)
            else:
                time.sleep(delay)
            if timed_out:
                raise DeadlineExceededError(retries=retries)
            retries += 1
