"""
Message Routes

API endpoints for the mailbox.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from .deps import get_admin_actor, get_current_actor, get_engine, http_error
from ..errors import NexusMailError
from ..models.message import EVERYONE, MessageFilter, MessageKind, Priority
from ..models.user import User
from ..services.engine_service import EngineService

router = APIRouter(prefix="/messages", tags=["messages"])


# Request/Response models

class SendMessageRequest(BaseModel):
    recipient_target: str = EVERYONE
    subject: str
    content: str
    kind: MessageKind = MessageKind.PERSONAL
    priority: Priority = Priority.NORMAL
    tags: List[str] = []
    scheduled_for: Optional[datetime] = None


class MessageResponse(BaseModel):
    id: str
    sender_id: str
    recipient_target: str
    subject: str
    content: str
    kind: str
    priority: str
    is_read: bool
    is_starred: bool
    created_at: str
    tags: List[str]
    scheduled_for: Optional[str]


class UnreadCountResponse(BaseModel):
    unread: int


class StatsResponse(BaseModel):
    total_messages: int
    broadcast_count: int
    system_count: int
    personal_count: int
    active_users: int
    read_rate: int


# Endpoints

@router.get("", response_model=List[MessageResponse])
@router.get("/", response_model=List[MessageResponse])
async def list_messages(
    filter: MessageFilter = MessageFilter.ALL,
    search: Optional[str] = None,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """List the actor's mailbox, newest first"""
    messages = await engine.mailbox_service.list_for(actor.id, filter, search)
    return [MessageResponse(**m.to_dict()) for m in messages]


@router.post("", response_model=MessageResponse)
@router.post("/", response_model=MessageResponse)
async def send_message(
    request: SendMessageRequest,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Send a message as the actor"""
    try:
        message = await engine.mailbox_service.send(
            sender_id=actor.id,
            recipient_target=request.recipient_target,
            subject=request.subject,
            content=request.content,
            kind=request.kind,
            priority=request.priority,
            tags=request.tags,
            scheduled_for=request.scheduled_for,
        )
    except NexusMailError as e:
        raise http_error(e)
    return MessageResponse(**message.to_dict())


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Unread badge for the actor"""
    return UnreadCountResponse(unread=await engine.mailbox_service.unread_count(actor.id))


@router.post("/read-all")
async def mark_all_read(
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Mark the actor's whole mailbox read"""
    changed = await engine.mailbox_service.mark_all_read_for_actor(actor.id)
    return {"success": True, "marked": changed}


@router.get("/sent", response_model=List[MessageResponse])
async def list_sent(
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Messages sent by the actor"""
    messages = await engine.mailbox_service.list_sent(actor.id)
    return [MessageResponse(**m.to_dict()) for m in messages]


@router.get("/stats", response_model=StatsResponse)
async def stats(
    admin: User = Depends(get_admin_actor),
    engine: EngineService = Depends(get_engine),
):
    """Admin dashboard overview"""
    return StatsResponse(**await engine.mailbox_service.stats())


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: str,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Get a message as seen by the actor"""
    try:
        message = await engine.mailbox_service.get_for(message_id, actor.id)
    except NexusMailError as e:
        raise http_error(e)
    return MessageResponse(**message.to_dict())


@router.post("/{message_id}/read", response_model=MessageResponse)
async def mark_read(
    message_id: str,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Mark message read"""
    try:
        message = await engine.mailbox_service.mark_read(message_id, actor.id)
    except NexusMailError as e:
        raise http_error(e)
    return MessageResponse(**message.to_dict())


@router.post("/{message_id}/unread", response_model=MessageResponse)
async def mark_unread(
    message_id: str,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Mark message unread"""
    try:
        message = await engine.mailbox_service.mark_unread(message_id, actor.id)
    except NexusMailError as e:
        raise http_error(e)
    return MessageResponse(**message.to_dict())


@router.post("/{message_id}/star", response_model=MessageResponse)
async def toggle_star(
    message_id: str,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Star or unstar message"""
    try:
        message = await engine.mailbox_service.toggle_star(message_id, actor.id)
    except NexusMailError as e:
        raise http_error(e)
    return MessageResponse(**message.to_dict())


@router.delete("/{message_id}")
async def recall_message(
    message_id: str,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Recall message from every mailbox (sender only)"""
    try:
        await engine.mailbox_service.delete(message_id, actor.id)
    except NexusMailError as e:
        raise http_error(e)
    return {"success": True}
