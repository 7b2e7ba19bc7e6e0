"""PingPong — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pingpong.application.use_cases.establish_connection import (
    BackendFactory,
    EstablishConnectionUseCase,
    SleepFn,
)
from pingpong.application.use_cases.ping_counter import PingCounter
from pingpong.config import Settings, settings as default_settings
from pingpong.domain.errors import ConnectionExhausted, SchemaInitError
from pingpong.domain.value_objects.enums import ServiceState
from pingpong.infrastructure.api.dependencies import build_backend_factory, describe_backend
from pingpong.infrastructure.api.routes_health import router as health_router
from pingpong.infrastructure.api.routes_pingpong import router as pingpong_router

logger = logging.getLogger(__name__)


def _set_state(app: FastAPI, state: ServiceState) -> None:
    app.state.service_state = state
    logger.info("Service state: %s", state.value)


def create_app(
    settings: Settings | None = None,
    backend_factory: BackendFactory | None = None,
    sleep: SleepFn | None = None,
) -> FastAPI:
    settings = settings or default_settings
    backend_factory = backend_factory or build_backend_factory(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Connect before serving; a failed connection aborts startup."""
        _set_state(app, ServiceState.CONNECTING)
        establish = EstablishConnectionUseCase(
            backend_factory,
            policy=settings.retry_policy,
            sleep=sleep,
            description=describe_backend(settings),
        )
        try:
            backend = await establish.execute()
        except (ConnectionExhausted, SchemaInitError):
            _set_state(app, ServiceState.FAILED)
            raise
        except Exception:
            logger.exception("Unexpected error while opening %s", describe_backend(settings))
            _set_state(app, ServiceState.FAILED)
            raise

        app.state.counter = PingCounter(backend)
        _set_state(app, ServiceState.READY)
        _set_state(app, ServiceState.SERVING)
        try:
            yield
        finally:
            _set_state(app, ServiceState.DRAINING)
            await app.state.counter.close()
            _set_state(app, ServiceState.STOPPED)

    app = FastAPI(
        title="PingPong",
        description="Durable ping-pong counter",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service_state = ServiceState.STARTING

    # Register routers
    app.include_router(health_router)
    app.include_router(pingpong_router)

    return app


app = create_app()
