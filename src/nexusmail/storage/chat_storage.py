"""
Chat Storage

In-memory storage for support chat sessions and chat messages.
"""
import logging
from typing import Dict, List, Optional

from .base import BaseStorage
from ..models.chat import ChatSession, ChatMessage, SessionStatus

logger = logging.getLogger("nexusmail.storage.chat")


class ChatSessionStorage(BaseStorage):
    """Storage for ChatSession entities"""

    def _reset(self):
        self._sessions: Dict[str, ChatSession] = {}
        # user_id -> session ids, oldest first
        self._by_user: Dict[str, List[str]] = {}

    async def create(self, session: ChatSession) -> ChatSession:
        """Store a new session"""
        self._sessions[session.id] = session
        self._by_user.setdefault(session.user_id, []).append(session.id)
        return session

    async def get_by_id(self, session_id: str) -> Optional[ChatSession]:
        """Get session by ID"""
        return self._sessions.get(session_id)

    async def update(self, session: ChatSession) -> ChatSession:
        """Replace stored session"""
        self._sessions[session.id] = session
        return session

    async def get_latest_for_user(self, user_id: str) -> Optional[ChatSession]:
        """Most recently created session of a user"""
        ids = self._by_user.get(user_id)
        return self._sessions[ids[-1]] if ids else None

    async def list_by_user(self, user_id: str) -> List[ChatSession]:
        """All sessions of a user, oldest first"""
        return [self._sessions[sid] for sid in self._by_user.get(user_id, [])]

    async def list_all(self, status: Optional[SessionStatus] = None) -> List[ChatSession]:
        """List sessions ordered by last activity (sessions without messages last)"""
        sessions = list(self._sessions.values())
        if status is not None:
            sessions = [s for s in sessions if s.status == status]
        with_activity = sorted(
            (s for s in sessions if s.last_message_at),
            key=lambda s: (s.last_message_at, s.created_at),
            reverse=True,
        )
        without_activity = sorted(
            (s for s in sessions if not s.last_message_at),
            key=lambda s: s.created_at,
            reverse=True,
        )
        return with_activity + without_activity


class ChatMessageStorage(BaseStorage):
    """Storage for ChatMessage entities, append-only per session"""

    def _reset(self):
        self._messages: Dict[str, List[ChatMessage]] = {}

    async def create(self, message: ChatMessage) -> ChatMessage:
        """Append message to its session"""
        self._messages.setdefault(message.session_id, []).append(message)
        return message

    async def list_by_session(self, session_id: str) -> List[ChatMessage]:
        """Messages of a session in chronological order"""
        return list(self._messages.get(session_id, []))

    async def get_last(self, session_id: str) -> Optional[ChatMessage]:
        """Last message of a session"""
        messages = self._messages.get(session_id)
        return messages[-1] if messages else None

    async def replace_all(self, session_id: str, messages: List[ChatMessage]):
        """Replace the messages of a session (same ids, same order)"""
        self._messages[session_id] = list(messages)
