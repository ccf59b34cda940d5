"""
Liveness and readiness probes.
"""

from typing import Literal

from fastapi import APIRouter, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from shared.config import get_settings
from shared.database import check_connection, get_supabase_client

router = APIRouter()


class HealthResponse(BaseModel):
    status: Literal["healthy"] = "healthy"
    version: str


class ReadinessResponse(BaseModel):
    status: Literal["ready", "not_ready"]
    database: Literal["memory", "connected", "unavailable"]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """200 whenever the process is serving requests."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """
    Report whether the credential store can serve requests.

    The in-memory store is always ready. The Supabase store is probed with a
    one-row query; if that fails the endpoint answers 503.
    """
    if get_settings().user_store == "memory":
        return ReadinessResponse(status="ready", database="memory")

    try:
        client = get_supabase_client()
    except RuntimeError:
        connected = False
    else:
        connected = await run_in_threadpool(check_connection, client)

    if not connected:
        response.status_code = 503
        return ReadinessResponse(status="not_ready", database="unavailable")
    return ReadinessResponse(status="ready", database="connected")
