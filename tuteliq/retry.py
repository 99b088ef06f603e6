"""
tuteliq/retry.py
=================
Retry Policy — Tuteliq Python SDK

Wraps a single-attempt coroutine (normally a Transport call) and retries
transient failures (network, timeout, rate-limit, 5xx, unclassified) with
exponential back-off.

Usage::

    policy = RetryPolicy(max_retries=3, retry_delay=1.0)
    response = await policy.run(lambda: transport.request("GET", "/api/v1/pricing"))

Delay before attempt k (0-indexed, k >= 1) is ``retry_delay * 2 ** (k - 1)``,
so with retry_delay=1.0 the waits are 1s, 2s, 4s, ...

This module does NOT:
    - Perform HTTP calls itself
    - Retry authentication, validation, not-found, quota or tier errors
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from tuteliq.errors import ErrorKind, TuteliqError

logger = logging.getLogger("tuteliq.retry")

T = TypeVar("T")

EXHAUSTED_MESSAGE = "Request failed after retries"


class RetryPolicy:
    """Bounded exponential back-off around an async call."""

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        """Back-off to wait before the given 0-indexed attempt (attempt >= 1)."""
        return self.retry_delay * (2 ** (attempt - 1))

    async def run(self, call: Callable[[], Awaitable[T]]) -> T:
        """
        Invoke ``call`` up to ``max_retries`` times.

        Returns:
            The first successful result.

        Raises:
            TuteliqError: Immediately for non-retryable kinds; otherwise the
                          last error once attempts are exhausted.
        """
        last_exc: TuteliqError | None = None

        for attempt in range(self.max_retries):
            if attempt > 0:
                delay = self.delay_for(attempt)
                logger.warning(
                    "Request failed (attempt %d/%d): %s — retrying in %.1fs",
                    attempt,
                    self.max_retries,
                    last_exc,
                    delay,
                )
                await self._sleep(delay)

            try:
                return await call()
            except TuteliqError as exc:
                if not exc.retryable:
                    logger.debug("Non-retryable error: %s", exc)
                    raise
                last_exc = exc

        if last_exc is None:
            raise TuteliqError(ErrorKind.GENERIC, EXHAUSTED_MESSAGE)

        logger.error("Request failed after %d attempts: %s", self.max_retries, last_exc)
        raise last_exc
