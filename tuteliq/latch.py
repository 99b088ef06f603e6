"""
tuteliq/latch.py
=================
Single-shot latch over an asyncio Future.

A latch is completed or failed at most once; later attempts are no-ops
and report False. Both a success event and a connection-loss path may
race to settle the same latch, and whichever comes first wins.
"""

import asyncio
from typing import Generic, TypeVar

T = TypeVar("T")


class Latch(Generic[T]):
    """One-time result holder that tolerates redundant settlement."""

    def __init__(self) -> None:
        self._future: asyncio.Future | None = None

    def _ensure(self) -> asyncio.Future:
        # Bound lazily so the latch can be built outside a running loop.
        if self._future is None:
            self._future = asyncio.get_running_loop().create_future()
        return self._future

    @property
    def done(self) -> bool:
        return self._future is not None and self._future.done()

    def resolve(self, value: T) -> bool:
        future = self._ensure()
        if future.done():
            return False
        future.set_result(value)
        return True

    def reject(self, exc: BaseException) -> bool:
        future = self._ensure()
        if future.done():
            return False
        future.set_exception(exc)
        return True

    async def wait(self) -> T:
        # shield: a cancelled waiter must not cancel the shared future
        return await asyncio.shield(self._ensure())

    def discard(self) -> None:
        """Mark a rejected result as retrieved so asyncio does not warn."""
        if self._future is not None and self._future.done() and not self._future.cancelled():
            self._future.exception()
