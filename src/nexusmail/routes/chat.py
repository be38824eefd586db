"""
Chat Routes

API endpoints for support chat: member widget and admin queue.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .deps import get_admin_actor, get_current_actor, get_engine, http_error
from ..errors import NexusMailError
from ..models.chat import ChatMessageKind, ChatSession, SessionStatus
from ..models.user import User
from ..services.engine_service import EngineService

router = APIRouter(prefix="/chat", tags=["chat"])


# Request/Response models

class AppendMessageRequest(BaseModel):
    content: str = ""
    kind: ChatMessageKind = ChatMessageKind.TEXT
    attachment_ref: Optional[str] = None


class CloseSessionRequest(BaseModel):
    notice: Optional[str] = None


class SessionResponse(BaseModel):
    id: str
    user_id: str
    last_message_preview: str
    last_message_at: Optional[str]
    unread_count_for_admin: int
    status: str
    created_at: str


class ChatMessageResponse(BaseModel):
    id: str
    session_id: str
    sender_id: str
    sender_role: str
    content: str
    kind: str
    attachment_ref: Optional[str]
    timestamp: str
    is_read: bool


async def _get_accessible_session(engine: EngineService, session_id: str, actor: User) -> ChatSession:
    """Admins see every session, members only their own"""
    try:
        session = await engine.chat_service.get_session(session_id)
    except NexusMailError as e:
        raise http_error(e)
    if not actor.is_admin and session.user_id != actor.id:
        raise HTTPException(status_code=403, detail="Access denied")
    return session


# Member widget

@router.get("/my", response_model=SessionResponse)
async def get_my_session(
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Get or open the actor's support session"""
    try:
        session = await engine.chat_service.get_or_create_for_user(actor.id)
    except NexusMailError as e:
        raise http_error(e)
    return SessionResponse(**session.to_dict())


@router.post("/my/new", response_model=SessionResponse)
async def start_new_conversation(
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Start a new conversation after the previous one was closed"""
    try:
        session = await engine.chat_service.start_new_conversation(actor.id)
    except NexusMailError as e:
        raise http_error(e)
    return SessionResponse(**session.to_dict())


@router.get("/my/history", response_model=List[SessionResponse])
async def my_history(
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """All sessions of the actor, oldest first"""
    sessions = await engine.chat_service.sessions_for_user(actor.id)
    return [SessionResponse(**s.to_dict()) for s in sessions]


# Admin queue

@router.get("/sessions", response_model=List[SessionResponse])
async def list_sessions(
    status: Optional[SessionStatus] = None,
    admin: User = Depends(get_admin_actor),
    engine: EngineService = Depends(get_engine),
):
    """Support sessions, most recent activity first"""
    sessions = await engine.chat_service.list_sessions(status)
    return [SessionResponse(**s.to_dict()) for s in sessions]


@router.get("/unread")
async def total_unread(
    admin: User = Depends(get_admin_actor),
    engine: EngineService = Depends(get_engine),
):
    """Unread member messages across all sessions"""
    return {"unread": await engine.chat_service.total_unread_for_admin()}


@router.post("/sessions/{session_id}/close", response_model=SessionResponse)
async def close_session(
    session_id: str,
    request: CloseSessionRequest,
    admin: User = Depends(get_admin_actor),
    engine: EngineService = Depends(get_engine),
):
    """Close an active session, optionally posting a closing notice"""
    try:
        session = await engine.chat_service.close(session_id, closed_by=admin.id, notice=request.notice)
    except NexusMailError as e:
        raise http_error(e)
    return SessionResponse(**session.to_dict())


# Shared

@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Get session by ID"""
    session = await _get_accessible_session(engine, session_id, actor)
    return SessionResponse(**session.to_dict())


@router.get("/sessions/{session_id}/messages", response_model=List[ChatMessageResponse])
async def list_chat_messages(
    session_id: str,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Messages of a session in chronological order"""
    await _get_accessible_session(engine, session_id, actor)
    messages = await engine.chat_service.list_messages(session_id)
    return [ChatMessageResponse(**m.to_dict()) for m in messages]


@router.post("/sessions/{session_id}/messages", response_model=ChatMessageResponse)
async def append_chat_message(
    session_id: str,
    request: AppendMessageRequest,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Post a message into a session"""
    try:
        message = await engine.chat_service.append(
            session_id,
            sender_id=actor.id,
            content=request.content,
            kind=request.kind,
            attachment_ref=request.attachment_ref,
        )
    except NexusMailError as e:
        raise http_error(e)
    return ChatMessageResponse(**message.to_dict())


@router.post("/sessions/{session_id}/read")
async def mark_session_read(
    session_id: str,
    actor: User = Depends(get_current_actor),
    engine: EngineService = Depends(get_engine),
):
    """Mark the other side's messages read"""
    await _get_accessible_session(engine, session_id, actor)
    if actor.is_admin:
        session = await engine.chat_service.mark_read_by_admin(session_id)
        return {"success": True, "unread_count_for_admin": session.unread_count_for_admin}
    marked = await engine.chat_service.mark_read_by_member(session_id)
    return {"success": True, "marked": marked}
