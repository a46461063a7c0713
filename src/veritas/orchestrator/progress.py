# src/veritas/orchestrator/progress.py
"""Delivery of progress events to caller-supplied callbacks."""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from veritas.orchestrator.models import ProgressUpdate

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressUpdate], Union[None, Awaitable[None]]]


class ProgressDispatcher:
    """Queues progress events and delivers them from a background task.

    The pipeline only enqueues, so a slow or failing callback never delays a
    stage. Coroutine callbacks are awaited; plain functions run in a worker
    thread. Each delivery is bounded by callback_timeout seconds.
    """

    def __init__(self, callback: ProgressCallback, callback_timeout: float = 1.0):
        self._callback = callback
        self._callback_timeout = callback_timeout
        self._is_async = inspect.iscoroutinefunction(callback) or inspect.iscoroutinefunction(
            getattr(callback, "__call__", None)
        )
        self._queue: asyncio.Queue[ProgressUpdate] = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None
        self.delivered = 0
        self.failed = 0

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    def emit(self, update: ProgressUpdate) -> None:
        """Enqueue an update without waiting for delivery."""
        self._queue.put_nowait(update)

    async def close(self, drain_seconds: float = 0.25) -> None:
        """Give queued events a bounded chance to deliver, then stop."""
        if self._task is None:
            return

        if drain_seconds > 0:
            try:
                await asyncio.wait_for(self._queue.join(), timeout=drain_seconds)
            except asyncio.TimeoutError:
                logger.warning(
                    f"Dropping {self._queue.qsize()} undelivered progress events after {drain_seconds}s"
                )

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            update = await self._queue.get()
            try:
                await self._deliver(update)
            finally:
                self._queue.task_done()

    async def _deliver(self, update: ProgressUpdate) -> None:
        try:
            if self._is_async:
                await asyncio.wait_for(self._callback(update), timeout=self._callback_timeout)
            else:
                await asyncio.wait_for(
                    asyncio.to_thread(self._callback, update), timeout=self._callback_timeout
                )
            self.delivered += 1
        except asyncio.TimeoutError:
            self.failed += 1
            logger.warning(
                f"Progress callback exceeded {self._callback_timeout}s for {update.state.value}"
            )
        except Exception as e:
            self.failed += 1
            logger.warning(f"Progress callback failed for {update.state.value}: {e}")
