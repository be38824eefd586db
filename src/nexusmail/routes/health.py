"""
Health Check Routes

Endpoints for service health monitoring.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from .deps import get_engine
from ..services.engine_service import EngineService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "nexusmail-engine",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/ready")
async def readiness_check(engine: EngineService = Depends(get_engine)):
    """
    Readiness check - indicates if service is ready to handle requests.
    The draft assistant is optional and does not affect readiness.
    """
    return {
        "ready": engine.is_initialized,
        "assistant_enabled": engine.assistant_service.enabled,
        "assistant_available": await engine.assistant_service.health_check(),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/live")
async def liveness_check():
    """Liveness check - indicates if service is running."""
    return {
        "alive": True,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
