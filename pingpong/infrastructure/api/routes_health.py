"""Health check endpoint."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from pingpong.application.use_cases.ping_counter import PingCounter
from pingpong.config import Settings
from pingpong.domain.value_objects.enums import ServiceState
from pingpong.infrastructure.api.dependencies import get_service_state, get_settings

router = APIRouter(tags=["health"])


def _unavailable() -> PlainTextResponse:
    return PlainTextResponse("Service Unavailable", status_code=503)


@router.get("/health", response_class=PlainTextResponse)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_settings),
    state: ServiceState = Depends(get_service_state),
) -> PlainTextResponse:
    """Liveness probe; also pings the backend unless HEALTH_CHECK_BACKEND is off."""
    if state != ServiceState.SERVING:
        return _unavailable()
    # absent until the lifespan has connected
    counter: PingCounter | None = getattr(request.app.state, "counter", None)
    if counter is None:
        return _unavailable()
    if settings.health_check_backend and not await counter.ping():
        return _unavailable()
    return PlainTextResponse("OK")
