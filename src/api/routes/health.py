"""Liveness and dependency health endpoints."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from infrastructure.database.models import KVStoreModel
from infrastructure.database.session import get_async_session

logger = structlog.get_logger()

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Service status; dependency fields are filled by the detailed check."""

    status: str
    version: str
    timestamp: str
    environment: str
    store: str | None = None
    identity_provider: str | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health_check() -> HealthResponse:
    """Answer without touching any dependency, for load balancer probes."""
    return HealthResponse(
        status="ok",
        version=API_VERSION,
        timestamp=_now(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Dependency health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Probe the key-value store and report identity provider configuration.

    Status is ``degraded`` when the store cannot be read. The identity
    provider is not called; only its configuration is reported.
    """
    try:
        await db.execute(select(KVStoreModel.key).limit(1))
        store_status = "ok"
    except SQLAlchemyError as e:
        logger.warning("store_health_check_failed", error=str(e))
        store_status = f"unhealthy: {e}"

    return HealthResponse(
        status="ok" if store_status == "ok" else "degraded",
        version=API_VERSION,
        timestamp=_now(),
        environment=settings.app_env,
        store=store_status,
        identity_provider="configured" if settings.supabase_auth_url else "not configured",
    )
