"""Ping-pong endpoints — increment and read-only count."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from pingpong.application.use_cases.ping_counter import PingCounter
from pingpong.config import Settings
from pingpong.domain.errors import BackendUnavailable
from pingpong.domain.value_objects.counter_value import format_pong
from pingpong.domain.value_objects.enums import ResponseFormat
from pingpong.infrastructure.api.dependencies import get_counter, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pingpong"])


@router.api_route("/", methods=["GET", "POST"])
@router.api_route("/pingpong", methods=["GET", "POST"])
async def ping_pong(
    counter: PingCounter = Depends(get_counter),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Increment the counter and answer with the value it had before."""
    try:
        value = await counter.increment_and_get()
    except BackendUnavailable:
        raise HTTPException(status_code=500, detail="Internal server error")

    message = format_pong(value)
    logger.info("Responded with: %s", message)
    if settings.response_format == ResponseFormat.TEXT:
        return PlainTextResponse(message)
    return JSONResponse({"message": message})


@router.get("/pingpongcount", response_class=PlainTextResponse)
async def ping_pong_count(counter: PingCounter = Depends(get_counter)) -> PlainTextResponse:
    """Current counter value as a bare decimal, for other services to parse."""
    try:
        value = await counter.peek()
    except BackendUnavailable:
        raise HTTPException(status_code=500, detail="Internal server error")

    logger.debug("Returned count: %d", value)
    return PlainTextResponse(str(value))
