"""
Completion signal returned by Message.fetch().

A thin wrapper over an asyncio.Future that settles at most once. Every signal
is tagged with the generation of the message that created it; the message
bumps its generation on cleanup(), which turns any signal handed out earlier
into a no-op. A late resolve() from a slow lookup can therefore never
settle a signal belonging to an attempt that was already cleaned up.
"""

import asyncio
import logging
from typing import Any, Callable, Generator

logger = logging.getLogger(__name__)


class CompletionSignal:
    def __init__(self, generation: int, is_current: Callable[[int], bool]):
        self.generation = generation
        self._is_current = is_current
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def stale(self) -> bool:
        return not self._is_current(self.generation)

    def done(self) -> bool:
        return self._future.done()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def _can_settle(self) -> bool:
        if self.stale:
            logger.debug("Ignoring settlement of stale signal (generation=%d)", self.generation)
            return False
        return not self._future.done()

    def resolve(self, value: Any = None) -> bool:
        """Fulfil the signal. Returns False if it was already settled or is stale."""
        if not self._can_settle():
            return False
        self._future.set_result(value)
        return True

    def reject(self, exc: BaseException) -> bool:
        """Fail the signal with exc. Returns False if it was already settled or is stale."""
        if not self._can_settle():
            return False
        self._future.set_exception(exc)
        return True

    def cancel(self) -> bool:
        return self._future.cancel()

    async def wait(self) -> Any:
        return await self._future

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()

    def __repr__(self) -> str:
        if self._future.cancelled():
            status = "cancelled"
        elif self._future.done():
            status = "failed" if self._future.exception() else "resolved"
        else:
            status = "pending"
        return f"<CompletionSignal generation={self.generation} {status}>"
