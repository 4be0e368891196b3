"""Bounded fixed-delay retry around a single GraphQL request."""

import logging
import time
from collections.abc import Callable

import httpx

from .exceptions import TransportFailure
from .models import MAX_ATTEMPTS, RETRY_DELAY, SUCCESS_DELAY

logger = logging.getLogger(__name__)


class RetryingTransport:
    """Sends a request up to max_attempts times with a fixed delay between tries.

    A 2xx response with a JSON object body is a success, even when the body
    carries GraphQL errors; those are the caller's to handle. Non-2xx
    statuses, any httpx.RequestError and unparseable bodies are failures.
    """

    def __init__(
        self,
        send: Callable[[dict], httpx.Response],
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY,
        success_delay: float = SUCCESS_DELAY,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._send = send
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.success_delay = success_delay
        self.calls = 0
        self.attempts = 0
        self.failures = 0

    def _attempt(self, request: dict) -> dict:
        try:
            resp = self._send(request)
        except httpx.RequestError as exc:
            raise TransportFailure(f"{type(exc).__name__}: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise TransportFailure(f"HTTP {resp.status_code}", status=resp.status_code)

        try:
            body = resp.json()
        except ValueError as exc:
            raise TransportFailure("response body is not JSON", status=resp.status_code) from exc
        if not isinstance(body, dict):
            raise TransportFailure("response body is not a JSON object", status=resp.status_code)
        return body

    def call(self, request: dict, max_attempts: int | None = None) -> dict | None:
        """Send request, retrying on failure. Returns the body, or None if every attempt failed."""
        attempts = self.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.calls += 1

        for attempt in range(1, attempts + 1):
            self.attempts += 1
            try:
                body = self._attempt(request)
            except TransportFailure as exc:
                self.failures += 1
                logger.warning("Request failed (%s), attempt %d/%d", exc, attempt, attempts)
                if attempt < attempts:
                    time.sleep(self.retry_delay)
                continue

            time.sleep(self.success_delay)
            return body

        logger.error("Request failed after %d attempts, giving up", attempts)
        return None
