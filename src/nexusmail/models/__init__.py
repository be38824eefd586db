"""
NexusMail Data Models

Domain models for the messaging and support-chat engine.
"""
from .user import User, UserRole
from .message import Message, MessageKind, MessageFilter, Priority, EVERYONE
from .template import Template
from .chat import ChatSession, ChatMessage, SessionStatus, ChatMessageKind
from .draft import Draft, Tone

__all__ = [
    'User',
    'UserRole',
    'Message',
    'MessageKind',
    'MessageFilter',
    'Priority',
    'EVERYONE',
    'Template',
    'ChatSession',
    'ChatMessage',
    'SessionStatus',
    'ChatMessageKind',
    'Draft',
    'Tone',
]
