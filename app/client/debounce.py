"""Debounced execution for search-as-you-type."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEARCH_DEBOUNCE_INTERVAL = 0.5


class Debouncer:
    """Run only the last of a burst of calls, after ``delay`` seconds of quiet.

    Each call cancels the previously scheduled task, so awaiting a superseded
    task raises ``asyncio.CancelledError``. Every call is also tagged with a
    sequence number; a call that was superseded after its request had already
    completed resolves to None instead of its stale result.
    """

    def __init__(self, delay: float = SEARCH_DEBOUNCE_INTERVAL):
        self.delay = delay
        self.seq = 0
        self._task: Optional[asyncio.Task] = None

    def call(
        self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> "asyncio.Task[Optional[T]]":
        self.cancel()
        self.seq += 1
        self._task = asyncio.create_task(self._run(self.seq, func, args, kwargs))
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, seq: int, func, args, kwargs) -> Optional[T]:
        await asyncio.sleep(self.delay)
        result = await func(*args, **kwargs)
        if seq != self.seq:
            logger.debug("Discarding stale result for call %s (latest %s)", seq, self.seq)
            return None
        return result
