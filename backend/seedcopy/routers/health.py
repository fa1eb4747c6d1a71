"""Health check endpoints for load balancers and monitoring."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from seedcopy.config import settings
from seedcopy.utils.kv_store import KVStore, get_kv_store

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Lightweight health check (no dependency calls).

    ``env_check`` reports which secrets are configured, never their values.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "ai_service": settings.ai_service,
        "version": settings.version,
        "environment": settings.environment,
        "env_check": {
            "baas_url": bool(settings.baas_url),
            "baas_anon_key": bool(settings.baas_anon_key),
            "baas_service_key": bool(settings.baas_service_key),
            "ai_api_key": bool(settings.ai_api_key),
            "kv_backend": settings.kv_backend,
        },
    }


@router.get("/health/ready")
async def readiness_check(store: KVStore = Depends(get_kv_store)):
    """Readiness check including the key-value store.

    Returns 200 only if the store answers a ping.
    """
    checks = {"service": "ok", "kv_store": "unknown"}
    healthy = True

    try:
        healthy = await store.ping()
        checks["kv_store"] = "ok" if healthy else "error: no reply to ping"
    except Exception as e:
        checks["kv_store"] = f"error: {str(e)[:100]}"
        healthy = False

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "checks": checks,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
