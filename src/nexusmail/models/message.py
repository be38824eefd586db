"""
Message Model

Represents a mailbox message: personal, system notice or broadcast.

A message is stored once. Recipients see a per-viewer projection of it
(is_read / is_starred belong to the viewer, not to the record).
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, Optional
from uuid import uuid4

# Recipient sentinel for broadcast fan-out
EVERYONE = "everyone"


class MessageKind(str, Enum):
    """Kind of mailbox message"""
    SYSTEM = "system"         # Platform notice
    PERSONAL = "personal"     # Addressed to one user
    BROADCAST = "broadcast"   # Addressed to EVERYONE


class Priority(str, Enum):
    """Message priority"""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class MessageFilter(str, Enum):
    """Mailbox list filters"""
    ALL = "all"
    UNREAD = "unread"
    STARRED = "starred"
    SYSTEM = "system"         # system + broadcast kinds


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_dt(value) -> Optional[datetime]:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


@dataclass(frozen=True)
class Message:
    """
    Message entity (viewer snapshot).

    recipient_target is a user id or EVERYONE.
    is_read / is_starred are filled in for the viewer that requested the snapshot;
    the stored record keeps them False.
    """
    id: str = field(default_factory=lambda: str(uuid4()))
    sender_id: str = ""
    recipient_target: str = EVERYONE
    subject: str = ""
    content: str = ""
    kind: MessageKind = MessageKind.PERSONAL
    priority: Priority = Priority.NORMAL
    is_read: bool = False
    is_starred: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    tags: FrozenSet[str] = frozenset()
    scheduled_for: Optional[datetime] = None

    @property
    def is_broadcast(self) -> bool:
        return self.recipient_target == EVERYONE

    def is_visible_to(self, actor_id: str) -> bool:
        """Visibility rule: addressed to the actor or to everyone"""
        return self.recipient_target == actor_id or self.recipient_target == EVERYONE

    def matches(self, search_term: str) -> bool:
        """Case-insensitive substring match on subject or content"""
        needle = search_term.lower()
        return needle in self.subject.lower() or needle in self.content.lower()

    def project(self, is_read: bool, is_starred: bool) -> "Message":
        """Snapshot of this record as seen by one viewer"""
        return replace(self, is_read=is_read, is_starred=is_starred)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": self.id,
            "sender_id": self.sender_id,
            "recipient_target": self.recipient_target,
            "subject": self.subject,
            "content": self.content,
            "kind": self.kind.value,
            "priority": self.priority.value,
            "is_read": self.is_read,
            "is_starred": self.is_starred,
            "created_at": self.created_at.isoformat(),
            "tags": sorted(self.tags),
            "scheduled_for": self.scheduled_for.isoformat() if self.scheduled_for else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        """Create from dictionary"""
        return cls(
            id=data.get("id") or str(uuid4()),
            sender_id=data.get("sender_id", ""),
            recipient_target=data.get("recipient_target", EVERYONE),
            subject=data.get("subject", ""),
            content=data.get("content", ""),
            kind=MessageKind(data["kind"]) if isinstance(data.get("kind"), str) else data.get("kind", MessageKind.PERSONAL),
            priority=Priority(data["priority"]) if isinstance(data.get("priority"), str) else data.get("priority", Priority.NORMAL),
            is_read=data.get("is_read", False),
            is_starred=data.get("is_starred", False),
            created_at=_parse_dt(data.get("created_at")) or _utcnow(),
            tags=frozenset(data.get("tags") or ()),
            scheduled_for=_parse_dt(data.get("scheduled_for")),
        )
