"""
Template Routes

API endpoints for compose templates (admin only).
"""
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from .deps import get_admin_actor, get_engine, http_error
from .messages import MessageResponse
from ..errors import NexusMailError
from ..models.message import EVERYONE, MessageKind, Priority
from ..models.user import User
from ..services.engine_service import EngineService

router = APIRouter(prefix="/templates", tags=["templates"])


class SaveTemplateRequest(BaseModel):
    name: str
    subject: str
    content: str
    priority: Priority = Priority.NORMAL


class ComposeRequest(BaseModel):
    recipient_target: str = EVERYONE
    kind: MessageKind = MessageKind.BROADCAST
    tags: List[str] = []


class TemplateResponse(BaseModel):
    id: str
    name: str
    subject: str
    content: str
    priority: str


@router.get("", response_model=List[TemplateResponse])
@router.get("/", response_model=List[TemplateResponse])
async def list_templates(
    admin: User = Depends(get_admin_actor),
    engine: EngineService = Depends(get_engine),
):
    """List templates"""
    templates = await engine.template_service.list()
    return [TemplateResponse(**t.to_dict()) for t in templates]


@router.post("", response_model=TemplateResponse)
@router.post("/", response_model=TemplateResponse)
async def save_template(
    request: SaveTemplateRequest,
    admin: User = Depends(get_admin_actor),
    engine: EngineService = Depends(get_engine),
):
    """Save current draft as template"""
    try:
        template = await engine.template_service.save(
            request.name, request.subject, request.content, request.priority
        )
    except NexusMailError as e:
        raise http_error(e)
    return TemplateResponse(**template.to_dict())


@router.delete("/{template_id}")
async def delete_template(
    template_id: str,
    admin: User = Depends(get_admin_actor),
    engine: EngineService = Depends(get_engine),
):
    """Delete template"""
    try:
        await engine.template_service.delete(template_id)
    except NexusMailError as e:
        raise http_error(e)
    return {"success": True}


@router.post("/{template_id}/send", response_model=MessageResponse)
async def compose_from_template(
    template_id: str,
    request: ComposeRequest,
    admin: User = Depends(get_admin_actor),
    engine: EngineService = Depends(get_engine),
):
    """Send a new message copied from the template"""
    try:
        message = await engine.template_service.compose_from(
            template_id,
            sender_id=admin.id,
            recipient_target=request.recipient_target,
            kind=request.kind,
            tags=request.tags,
        )
    except NexusMailError as e:
        raise http_error(e)
    return MessageResponse(**message.to_dict())
