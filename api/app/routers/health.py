"""Health and version endpoints."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from app.services import openrouter_client

router = APIRouter()

API_VERSION = "1.0.0"
STARTED_AT = datetime.now(timezone.utc)


class HealthResponse(BaseModel):
    """GET /api/health response."""

    model_config = ConfigDict(extra="forbid")
    status: Annotated[str, Field(description="Always 'ok'")]
    version: Annotated[str, Field(description="Semver MAJOR.MINOR.PATCH")]
    timestamp: Annotated[str, Field(description="ISO8601 UTC")]
    uptime_seconds: Annotated[int, Field(ge=0)]
    smart_search_configured: Annotated[bool, Field(description="OPENROUTER_API_KEY is set")]


@router.get("/version")
async def version():
    return {"version": API_VERSION}


@router.get("/health", response_model=HealthResponse)
async def health():
    """Liveness only. Direct search never depends on the completion backend."""
    now = datetime.now(timezone.utc)
    return HealthResponse(
        status="ok",
        version=API_VERSION,
        timestamp=now.strftime("%Y-%m-%dT%H:%M:%SZ"),
        uptime_seconds=max(0, int((now - STARTED_AT).total_seconds())),
        smart_search_configured=openrouter_client.is_configured(),
    )
