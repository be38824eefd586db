"""
Chat Service

Business logic for support chat sessions and chat messages.

Session lifecycle: none -> ACTIVE (first contact) -> CLOSED (admin action).
A closed session is history: members cannot write into it and have to
start a new conversation, admins can still post into it.

Lock order for operations touching both storages: session storage first,
then chat message storage.
"""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional

from ..errors import (
    InvalidSession,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    SessionClosed,
    ValidationError,
)
from ..models.chat import ChatMessage, ChatMessageKind, ChatSession, SessionStatus
from ..models.user import UserRole
from ..storage.chat_storage import ChatMessageStorage, ChatSessionStorage
from .directory_service import DirectoryService

logger = logging.getLogger("nexusmail.services.chat")

IMAGE_PREVIEW = "[Image]"


class ChatService:
    """Service for support chat operations"""

    def __init__(
        self,
        session_storage: ChatSessionStorage,
        message_storage: ChatMessageStorage,
        directory: DirectoryService,
        preview_chars: int = 100,
    ):
        self.session_storage = session_storage
        self.message_storage = message_storage
        self.directory = directory
        self.preview_chars = preview_chars

    # Session operations

    async def get_or_create_for_user(self, user_id: str) -> ChatSession:
        """
        Get the user's latest session whatever its status, or open a new one.

        Raises:
            NotFound: Unknown user
            ValidationError: User is an admin
        """
        await self._require_member(user_id)

        async with self.session_storage.lock:
            session = await self.session_storage.get_latest_for_user(user_id)
            if session:
                return session
            session = await self.session_storage.create(ChatSession(user_id=user_id))

        logger.info(f"Created chat session {session.id} for user {user_id}")
        return session

    async def start_new_conversation(self, user_id: str) -> ChatSession:
        """Return the user's active session, or open a fresh one if the latest is closed"""
        await self._require_member(user_id)

        async with self.session_storage.lock:
            session = await self.session_storage.get_latest_for_user(user_id)
            if session and session.is_active:
                return session
            session = await self.session_storage.create(ChatSession(user_id=user_id))

        logger.info(f"Started new conversation {session.id} for user {user_id}")
        return session

    async def get_session(self, session_id: str) -> ChatSession:
        """Get session by ID"""
        session = await self.session_storage.get_by_id(session_id)
        if not session:
            raise InvalidSession(f"Chat session '{session_id}' not found")
        return session

    async def list_sessions(self, status: Optional[SessionStatus] = None) -> List[ChatSession]:
        """Sessions for the admin queue, most recent activity first"""
        return await self.session_storage.list_all(status)

    async def sessions_for_user(self, user_id: str) -> List[ChatSession]:
        """Full session history of a user, oldest first"""
        return await self.session_storage.list_by_user(user_id)

    async def total_unread_for_admin(self) -> int:
        """Unread member messages across all sessions"""
        sessions = await self.session_storage.list_all()
        return sum(s.unread_count_for_admin for s in sessions)

    async def mark_read_by_admin(self, session_id: str) -> ChatSession:
        """Admin opened the session: reset unread count and mark member messages read"""
        async with self.session_storage.lock, self.message_storage.lock:
            session = await self.session_storage.get_by_id(session_id)
            if not session:
                raise InvalidSession(f"Chat session '{session_id}' not found")

            messages = await self.message_storage.list_by_session(session_id)
            await self.message_storage.replace_all(session_id, [
                replace(m, is_read=True) if m.is_from_member else m
                for m in messages
            ])
            return await self.session_storage.update(replace(session, unread_count_for_admin=0))

    async def mark_read_by_member(self, session_id: str) -> int:
        """Member opened the widget: mark admin replies read, returns how many changed"""
        async with self.session_storage.lock, self.message_storage.lock:
            if not await self.session_storage.get_by_id(session_id):
                raise InvalidSession(f"Chat session '{session_id}' not found")

            messages = await self.message_storage.list_by_session(session_id)
            changed = sum(1 for m in messages if not m.is_from_member and not m.is_read)
            await self.message_storage.replace_all(session_id, [
                m if m.is_from_member else replace(m, is_read=True)
                for m in messages
            ])
            return changed

    async def unread_for_member(self, session_id: str) -> int:
        """Admin replies the member has not read yet"""
        messages = await self.list_messages(session_id)
        return sum(1 for m in messages if not m.is_from_member and not m.is_read)

    async def close(
        self,
        session_id: str,
        closed_by: Optional[str] = None,
        notice: Optional[str] = None,
    ) -> ChatSession:
        """
        Close an active session.

        Args:
            session_id: Session to close
            closed_by: Admin closing the session (required for a notice)
            notice: Optional system message appended as closing notice

        Raises:
            InvalidSession: Unknown session
            InvalidTransition: Session is not active
            PermissionDenied: closed_by is not an admin
        """
        if closed_by is not None:
            await self.directory.require_admin(closed_by)
        elif notice:
            raise ValidationError("A closing notice needs the closing admin")

        async with self.session_storage.lock, self.message_storage.lock:
            session = await self.session_storage.get_by_id(session_id)
            if not session:
                raise InvalidSession(f"Chat session '{session_id}' not found")
            if session.status != SessionStatus.ACTIVE:
                raise InvalidTransition(
                    f"Cannot close session '{session_id}' in status {session.status.value}"
                )

            session = await self.session_storage.update(replace(session, status=SessionStatus.CLOSED))
            if notice and notice.strip():
                _, session = await self._append_locked(
                    session, closed_by, UserRole.ADMIN, notice.strip(), ChatMessageKind.SYSTEM, None
                )

        logger.info(f"Chat session {session_id} closed")
        return session

    # Message operations

    async def append(
        self,
        session_id: str,
        sender_id: str,
        content: str,
        kind: ChatMessageKind = ChatMessageKind.TEXT,
        attachment_ref: Optional[str] = None,
    ) -> ChatMessage:
        """
        Append a message and record the session activity in one step.

        Raises:
            ValidationError: Unknown sender, empty text, image without attachment,
                member-authored system message
            InvalidSession: Unknown session
            SessionClosed: Member writing into a closed session
            PermissionDenied: Member writing into another member's session
        """
        sender = await self.directory.resolve_user(sender_id)
        if not sender:
            raise ValidationError(f"Unknown sender '{sender_id}'")

        content = (content or "").strip()
        if kind == ChatMessageKind.IMAGE:
            if not attachment_ref:
                raise ValidationError("Image messages need an attachment")
        elif not content:
            raise ValidationError("Message content is required")
        if kind == ChatMessageKind.SYSTEM and not sender.is_admin:
            raise ValidationError("Only admins can post system messages")

        async with self.session_storage.lock, self.message_storage.lock:
            session = await self.session_storage.get_by_id(session_id)
            if not session:
                raise InvalidSession(f"Chat session '{session_id}' not found")
            if not sender.is_admin:
                if session.user_id != sender_id:
                    raise PermissionDenied("Members can only write into their own session")
                if session.status == SessionStatus.CLOSED:
                    raise SessionClosed(f"Chat session '{session_id}' is closed")

            message, _ = await self._append_locked(
                session, sender_id, sender.role, content, kind, attachment_ref
            )

        logger.info(f"Chat message {message.id} appended to {session_id} by {sender_id}")
        return message

    async def list_messages(self, session_id: str) -> List[ChatMessage]:
        """Messages of a session in chronological order"""
        if not await self.session_storage.get_by_id(session_id):
            raise InvalidSession(f"Chat session '{session_id}' not found")
        return await self.message_storage.list_by_session(session_id)

    # Internals

    async def _require_member(self, user_id: str):
        user = await self.directory.resolve_user(user_id)
        if not user:
            raise NotFound(f"User '{user_id}' not found")
        if user.is_admin:
            raise ValidationError("Support sessions are opened by members only")

    async def _append_locked(
        self,
        session: ChatSession,
        sender_id: str,
        sender_role: UserRole,
        content: str,
        kind: ChatMessageKind,
        attachment_ref: Optional[str],
    ) -> tuple[ChatMessage, ChatSession]:
        # Caller holds both locks; nothing below can fail halfway
        timestamp = datetime.now(timezone.utc)
        last = await self.message_storage.get_last(session.id)
        if last and last.timestamp > timestamp:
            timestamp = last.timestamp

        message = ChatMessage(
            session_id=session.id,
            sender_id=sender_id,
            sender_role=sender_role,
            content=content,
            kind=kind,
            attachment_ref=attachment_ref,
            timestamp=timestamp,
            is_read=False,
        )
        updated = self._with_activity(session, self._preview(message), sender_role, timestamp)

        await self.message_storage.create(message)
        await self.session_storage.update(updated)
        return message, updated

    def _with_activity(
        self,
        session: ChatSession,
        preview: str,
        author_role: UserRole,
        at: datetime,
    ) -> ChatSession:
        unread = session.unread_count_for_admin
        if author_role == UserRole.MEMBER:
            unread += 1
        return replace(
            session,
            last_message_preview=preview[:self.preview_chars],
            last_message_at=at,
            unread_count_for_admin=unread,
        )

    def _preview(self, message: ChatMessage) -> str:
        if message.kind == ChatMessageKind.IMAGE:
            return f"{IMAGE_PREVIEW} {message.content}" if message.content else IMAGE_PREVIEW
        return message.content
