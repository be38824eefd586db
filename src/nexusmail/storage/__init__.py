"""
NexusMail Storage Layer

In-memory storage implementations for NexusMail entities.
"""
from .base import BaseStorage
from .user_storage import UserStorage
from .message_storage import MessageStorage, ViewerFlags
from .template_storage import TemplateStorage
from .chat_storage import ChatSessionStorage, ChatMessageStorage

__all__ = [
    'BaseStorage',
    'UserStorage',
    'MessageStorage',
    'ViewerFlags',
    'TemplateStorage',
    'ChatSessionStorage',
    'ChatMessageStorage',
]
