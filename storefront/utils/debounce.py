"""
Trailing debounce on the asyncio event loop.
Holds at most one pending timer handle; every trigger replaces it.
"""
import asyncio
import inspect
from typing import Any, Callable, Optional, Set

from storefront.logger import logger


class Debouncer:
    """
    Runs `callback` once the input has been quiet for `delay` seconds.

    Each trigger() cancels the pending timer and schedules a new one, so a
    burst of triggers inside one quiet window collapses into a single call
    carrying the arguments of the last trigger. Coroutine callbacks are
    scheduled as tasks and tracked until they finish.
    """

    def __init__(self, callback: Callable[..., Any], delay: float):
        self.callback = callback
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self.fired = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any):
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire, args)

    def cancel(self):
        """Drop the pending invocation, if any. Running tasks are left alone."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple):
        self._handle = None
        self.fired += 1
        result = self.callback(*args)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Debounced call failed: {task.exception()}")

    async def drain(self):
        """Wait for every callback started so far to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self):
        self.cancel()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()
