# =============================================================================
# app/routers/health.py - Liveness / Readiness Probes
# =============================================================================
# /health       - process is up, reports environment and version
# /health/ready - Supabase tables and image buckets reachable; also reports
#                 whether card payments and SMTP are configured
# /health/live  - bare liveness
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from core.services.storage_service import BUCKETS
from lib.supabase_client import SupabaseClient

router = APIRouter()

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ReadinessChecks(BaseModel):
    """Per-dependency results; anything other than "ok" marks the API degraded."""
    database: str = "unknown"
    image_buckets: str = "unknown"
    payments: str = "disabled"
    email: str = "log-only"


class ReadinessResponse(BaseModel):
    status: str
    checks: ReadinessChecks
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_database() -> str:
    try:
        SupabaseClient.get_client().table("products").select("id").limit(1).execute()
    except Exception as e:
        return f"error: {str(e)[:60]}"
    return "ok"


def _check_buckets() -> str:
    try:
        found = {bucket.name for bucket in SupabaseClient.get_client().storage.list_buckets()}
    except Exception as e:
        return f"error: {str(e)[:60]}"

    missing = [name for name in BUCKETS if name not in found]
    return f"missing: {', '.join(missing)}" if missing else "ok"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness probe for the load balancer.

    Payments and email never make the API degraded: without them orders
    are still taken and emails are written to the log.
    """
    checks = ReadinessChecks(
        database=_check_database(),
        image_buckets=_check_buckets(),
        payments="enabled" if settings.payments_enabled else "disabled",
        email="smtp" if settings.smtp_enabled else "log-only",
    )
    ready = checks.database == "ok" and checks.image_buckets == "ok"

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    return LivenessResponse(status="alive", timestamp=_now())
