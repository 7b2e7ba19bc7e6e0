"""EstablishConnectionUseCase — open the counter backend with bounded retries."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from pingpong.application.ports.counter_backend import CounterBackend
from pingpong.domain.errors import BackendUnavailable, ConnectionExhausted, SchemaInitError
from pingpong.domain.policies.retry import RetryPolicy

logger = logging.getLogger(__name__)

BackendFactory = Callable[[], CounterBackend]
SleepFn = Callable[[float], Awaitable[None]]


class EstablishConnectionUseCase:
    """Builds a ready backend: connect with retries, probe, then ensure schema."""

    def __init__(
        self,
        backend_factory: BackendFactory,
        policy: RetryPolicy | None = None,
        sleep: SleepFn | None = None,
        description: str = "counter backend",
    ):
        self._backend_factory = backend_factory
        self._policy = policy or RetryPolicy()
        self._sleep = sleep or asyncio.sleep
        self._description = description

    async def try_connect(self, attempt: int) -> CounterBackend:
        """Single connection attempt: build a backend and probe it.

        Raises:
            BackendUnavailable: if the backend cannot be built or probed.
        """
        logger.debug("Connection attempt %d to %s", attempt, self._description)
        try:
            backend = self._backend_factory()
        except (BackendUnavailable, OSError) as e:
            raise BackendUnavailable(f"Failed to open {self._description}: {e}") from e

        try:
            await backend.ping()
        except BackendUnavailable:
            await backend.close()
            raise
        return backend

    async def execute(self) -> CounterBackend:
        """Return a backend that is reachable and holds an initialized counter.

        Raises:
            ConnectionExhausted: if every attempt of the retry policy failed.
            SchemaInitError: if the backend answered but storage setup failed.
        """
        max_attempts = self._policy.max_attempts
        logger.info("Connecting to %s", self._description)

        backend: CounterBackend | None = None
        last_error: BackendUnavailable | None = None
        for attempt in self._policy.attempts():
            try:
                backend = await self.try_connect(attempt)
                break
            except BackendUnavailable as e:
                last_error = e
                logger.warning(
                    "Failed to connect to %s (attempt %d/%d): %s",
                    self._description, attempt, max_attempts, e,
                )
                delay = self._policy.delay_after(attempt)
                if delay is not None:
                    await self._sleep(delay)

        if backend is None:
            logger.error("Giving up on %s after %d attempts", self._description, max_attempts)
            raise ConnectionExhausted(max_attempts, last_error)

        logger.info("Successfully connected to %s", self._description)

        try:
            await backend.ensure_schema()
        except BackendUnavailable as e:
            await backend.close()
            raise SchemaInitError(f"Failed to initialize {self._description}: {e}") from e

        return backend
