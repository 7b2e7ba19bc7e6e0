"""PingCounter — serialized access to the counter backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from pingpong.application.ports.counter_backend import CounterBackend
from pingpong.domain.errors import BackendUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PingCounter:
    """Owns the backend handle and the lock guarding it.

    Increments and peeks share one lock, so a peek never runs while an
    increment is in flight and at most one mutation reaches the backend at a
    time. No value is cached in memory: every answer comes from the backend.
    """

    def __init__(self, backend: CounterBackend):
        self._backend = backend
        self._lock = asyncio.Lock()

    async def increment_and_get(self) -> int:
        """Increment the counter and return the pre-increment value.

        Raises:
            BackendUnavailable: if the backend mutation failed; nothing was counted.
        """
        async with self._lock:
            try:
                return await self._settle(self._backend.increment_and_return())
            except BackendUnavailable as e:
                logger.error("Error incrementing counter: %s", e)
                raise

    async def peek(self) -> int:
        """Return the committed value without changing it."""
        async with self._lock:
            try:
                return await self._settle(self._backend.read())
            except BackendUnavailable as e:
                logger.error("Error getting counter: %s", e)
                raise

    async def ping(self) -> bool:
        try:
            await self._backend.ping()
        except BackendUnavailable as e:
            logger.warning("Backend health probe failed: %s", e)
            return False
        return True

    async def close(self) -> None:
        async with self._lock:
            await self._backend.close()

    async def _settle(self, call: Awaitable[T]) -> T:
        """Await a backend call that cancellation of the caller cannot interrupt.

        A file write runs in a worker thread and keeps going when the awaiting
        task is cancelled. The caller's cancellation is therefore deferred
        until the call has finished, so the lock is only released once the
        backend is idle again.
        """
        task = asyncio.ensure_future(call)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            logger.warning("Counter operation cancelled, waiting for the backend call to finish")
            await asyncio.wait({task})
            if not task.cancelled() and task.exception() is not None:
                logger.error("Cancelled counter operation failed: %s", task.exception())
            raise
