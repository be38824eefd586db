"""
Route Dependencies

Actor resolution, role gating and error translation shared by all routers.
"""
from fastapi import Depends, Header, HTTPException

from ..errors import (
    ChatError,
    InvalidSession,
    NexusMailError,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from ..models.user import User
from ..services.engine_service import EngineService, get_engine_service


def get_engine() -> EngineService:
    return get_engine_service()


async def get_current_actor(
    x_actor_id: str = Header(None),
    engine: EngineService = Depends(get_engine),
) -> User:
    """Dependency to resolve the acting user from the X-Actor-Id header"""
    if not x_actor_id:
        raise HTTPException(status_code=401, detail="X-Actor-Id header required")

    user = await engine.directory_service.resolve_user(x_actor_id)
    if not user:
        raise HTTPException(status_code=401, detail="Unknown actor")
    return user


async def get_admin_actor(actor: User = Depends(get_current_actor)) -> User:
    """Dependency for admin-only routes"""
    if not actor.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return actor


def http_error(error: NexusMailError) -> HTTPException:
    """Translate an engine error into an HTTP error"""
    if isinstance(error, (NotFound, InvalidSession)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, PermissionDenied):
        return HTTPException(status_code=403, detail=str(error))
    if isinstance(error, ChatError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
