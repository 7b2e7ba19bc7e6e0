"""FastAPI dependency injection — wires backends into the counter."""

from __future__ import annotations

import logging

from fastapi import Request

from pingpong.adapters.file_store.file_backend import FileCounterBackend
from pingpong.adapters.persistence.database import build_engine
from pingpong.adapters.persistence.sql_backend import SqlCounterBackend
from pingpong.application.ports.counter_backend import CounterBackend
from pingpong.application.use_cases.establish_connection import BackendFactory
from pingpong.application.use_cases.ping_counter import PingCounter
from pingpong.config import Settings
from pingpong.domain.value_objects.enums import ServiceState, StorageBackend

logger = logging.getLogger(__name__)


def build_backend_factory(settings: Settings) -> BackendFactory:
    """Return a zero-argument callable producing a fresh, unconnected backend."""
    if settings.storage_backend == StorageBackend.FILE:

        def _file_backend() -> CounterBackend:
            return FileCounterBackend(settings.counter_file, atomic_writes=settings.counter_file_atomic)

        return _file_backend

    def _sql_backend() -> CounterBackend:
        return SqlCounterBackend(build_engine(settings))

    return _sql_backend


def describe_backend(settings: Settings) -> str:
    if settings.storage_backend == StorageBackend.FILE:
        return f"counter file {settings.counter_file}"
    url = settings.sqlalchemy_url
    return f"database at {url.host}:{url.port}" if url.host else f"database {url.database}"


def get_counter(request: Request) -> PingCounter:
    return request.app.state.counter


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_service_state(request: Request) -> ServiceState:
    return request.app.state.service_state
