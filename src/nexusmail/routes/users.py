"""
Users Routes

Read-only endpoints for the identity directory.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .deps import get_current_actor, get_engine
from ..models.user import User, UserRole
from ..services.engine_service import EngineService

router = APIRouter(prefix="/users", tags=["users"])


class UserResponse(BaseModel):
    """User response"""
    id: str
    display_name: str
    role: str
    department: Optional[str]
    email: str
    avatar_url: Optional[str]


@router.get("", response_model=List[UserResponse])
@router.get("/", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = None,
    engine: EngineService = Depends(get_engine),
):
    """List registered users"""
    users = await engine.directory_service.list_users(role)
    return [UserResponse(**u.to_dict()) for u in users]


@router.get("/me", response_model=UserResponse)
async def get_me(actor: User = Depends(get_current_actor)):
    """Get the acting user"""
    return UserResponse(**actor.to_dict())


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, engine: EngineService = Depends(get_engine)):
    """Get user by ID"""
    user = await engine.directory_service.resolve_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse(**user.to_dict())
