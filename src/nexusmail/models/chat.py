"""
Chat Models

Support-chat sessions between a member and the admin pool, and the messages in them.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from .user import UserRole


class SessionStatus(str, Enum):
    """Support session status"""
    ACTIVE = "active"
    CLOSED = "closed"


class ChatMessageKind(str, Enum):
    """Kind of chat message"""
    TEXT = "text"
    IMAGE = "image"       # content is an optional caption, attachment_ref is required
    SYSTEM = "system"     # admin-authored notice (e.g. closing notice)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_dt(value) -> Optional[datetime]:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


@dataclass(frozen=True)
class ChatSession:
    """
    Support chat session.

    Lifecycle: ACTIVE -> CLOSED. A closed session is kept as history;
    a member who writes again gets a new session.

    unread_count_for_admin counts member-authored messages the admins
    have not read yet.
    """
    id: str = field(default_factory=lambda: str(uuid4()))
    user_id: str = ""
    last_message_preview: str = ""
    last_message_at: Optional[datetime] = None
    unread_count_for_admin: int = 0
    status: SessionStatus = SessionStatus.ACTIVE
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "last_message_preview": self.last_message_preview,
            "last_message_at": self.last_message_at.isoformat() if self.last_message_at else None,
            "unread_count_for_admin": self.unread_count_for_admin,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChatSession":
        """Create from dictionary"""
        return cls(
            id=data.get("id") or str(uuid4()),
            user_id=data.get("user_id", ""),
            last_message_preview=data.get("last_message_preview", ""),
            last_message_at=_parse_dt(data.get("last_message_at")),
            unread_count_for_admin=data.get("unread_count_for_admin", 0),
            status=SessionStatus(data["status"]) if isinstance(data.get("status"), str) else data.get("status", SessionStatus.ACTIVE),
            created_at=_parse_dt(data.get("created_at")) or _utcnow(),
        )


@dataclass(frozen=True)
class ChatMessage:
    """
    Chat message entity.

    sender_role is resolved from the directory when the message is appended,
    so read accounting does not depend on later directory lookups.
    """
    id: str = field(default_factory=lambda: str(uuid4()))
    session_id: str = ""
    sender_id: str = ""
    sender_role: UserRole = UserRole.MEMBER
    content: str = ""
    kind: ChatMessageKind = ChatMessageKind.TEXT
    attachment_ref: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)
    is_read: bool = False

    @property
    def is_from_member(self) -> bool:
        return self.sender_role == UserRole.MEMBER

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": self.id,
            "session_id": self.session_id,
            "sender_id": self.sender_id,
            "sender_role": self.sender_role.value,
            "content": self.content,
            "kind": self.kind.value,
            "attachment_ref": self.attachment_ref,
            "timestamp": self.timestamp.isoformat(),
            "is_read": self.is_read,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChatMessage":
        """Create from dictionary"""
        return cls(
            id=data.get("id") or str(uuid4()),
            session_id=data.get("session_id", ""),
            sender_id=data.get("sender_id", ""),
            sender_role=UserRole(data["sender_role"]) if isinstance(data.get("sender_role"), str) else data.get("sender_role", UserRole.MEMBER),
            content=data.get("content", ""),
            kind=ChatMessageKind(data["kind"]) if isinstance(data.get("kind"), str) else data.get("kind", ChatMessageKind.TEXT),
            attachment_ref=data.get("attachment_ref"),
            timestamp=_parse_dt(data.get("timestamp")) or _utcnow(),
            is_read=data.get("is_read", False),
        )
