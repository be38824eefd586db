"""
Message Storage

In-memory storage for mailbox messages and per-viewer flags.

One record per message (broadcasts are not copied per recipient).
Read/starred state lives in a separate map keyed by (message_id, viewer_id).
"""
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .base import BaseStorage
from ..models.message import Message

logger = logging.getLogger("nexusmail.storage.message")


@dataclass
class ViewerFlags:
    """Read/starred flags of one viewer for one message"""
    is_read: bool = False
    is_starred: bool = False


class MessageStorage(BaseStorage):
    """Storage for Message entities"""

    def _reset(self):
        self._messages: Dict[str, Message] = {}
        self._sequence: Dict[str, int] = {}
        self._flags: Dict[Tuple[str, str], ViewerFlags] = {}
        self._counter = itertools.count()

    async def create(self, message: Message) -> Message:
        """Store a new message"""
        self._messages[message.id] = message
        self._sequence[message.id] = next(self._counter)
        return message

    async def get_by_id(self, message_id: str) -> Optional[Message]:
        """Get stored record by ID (viewer flags not applied)"""
        return self._messages.get(message_id)

    async def delete(self, message_id: str) -> bool:
        """Remove a message and every viewer's flags for it"""
        if self._messages.pop(message_id, None) is None:
            return False
        self._sequence.pop(message_id, None)
        for key in [k for k in self._flags if k[0] == message_id]:
            del self._flags[key]
        return True

    async def list_all(self) -> List[Message]:
        """All records, newest first (ties broken by insertion order)"""
        return sorted(
            self._messages.values(),
            key=lambda m: (m.created_at, self._sequence[m.id]),
            reverse=True,
        )

    async def get_flags(self, message_id: str, viewer_id: str) -> ViewerFlags:
        """Flags of a viewer; a copy, unset flags default to False"""
        flags = self._flags.get((message_id, viewer_id))
        return ViewerFlags(flags.is_read, flags.is_starred) if flags else ViewerFlags()

    async def set_read(self, message_id: str, viewer_id: str, is_read: bool):
        """Set read flag for viewer"""
        self._flags.setdefault((message_id, viewer_id), ViewerFlags()).is_read = is_read

    async def set_starred(self, message_id: str, viewer_id: str, is_starred: bool):
        """Set starred flag for viewer"""
        self._flags.setdefault((message_id, viewer_id), ViewerFlags()).is_starred = is_starred

    @property
    def count(self) -> int:
        return len(self._messages)
