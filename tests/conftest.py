"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio

import pytest

from pingpong.application.ports.counter_backend import CounterBackend
from pingpong.config import Settings
from pingpong.domain.errors import BackendUnavailable

# ─── In-memory fakes ────────────────────────────────────────────────


class FakeCounterBackend(CounterBackend):
    """In-memory backend that yields to the event loop mid-operation.

    The yield between reading and writing the value turns any missing
    serialization in the caller into lost updates or overlapping calls,
    which ``max_in_flight`` records.
    """

    def __init__(
        self,
        value: int = 0,
        fail_ping: bool = False,
        fail_schema: bool = False,
        fail_ops: bool = False,
    ):
        self.value = value
        self.fail_ping = fail_ping
        self.fail_schema = fail_schema
        self.fail_ops = fail_ops
        self.schema_ensured = False
        self.closed = False
        self.in_flight = 0
        self.max_in_flight = 0

    async def ping(self):
        if self.fail_ping:
            raise BackendUnavailable("connection refused")

    async def ensure_schema(self):
        if self.fail_schema:
            raise BackendUnavailable("permission denied for schema public")
        self.schema_ensured = True

    async def read(self):
        self._enter()
        try:
            await asyncio.sleep(0)
            if self.fail_ops:
                raise BackendUnavailable("server closed the connection")
            return self.value
        finally:
            self._exit()

    async def increment_and_return(self):
        self._enter()
        try:
            old = self.value
            await asyncio.sleep(0)
            if self.fail_ops:
                raise BackendUnavailable("server closed the connection")
            self.value = old + 1
            return old
        finally:
            self._exit()

    async def close(self):
        self.closed = True

    def _enter(self):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)

    def _exit(self):
        self.in_flight -= 1


class RecordingSleep:
    """Stands in for asyncio.sleep and records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ─── Fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def fake_backend():
    return FakeCounterBackend()


@pytest.fixture
def make_fake_backend():
    return FakeCounterBackend


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def file_settings(tmp_path):
    return Settings(
        _env_file=None,
        storage_backend="file",
        counter_file=tmp_path / "pingpong-count.txt",
        db_max_retries=3,
        db_retry_delay=0,
    )
