"""
NexusMail API Routes

FastAPI route handlers for the NexusMail engine.
"""
from .health import router as health_router
from .users import router as users_router
from .messages import router as messages_router
from .templates import router as templates_router
from .chat import router as chat_router
from .assistant import router as assistant_router

__all__ = [
    'health_router',
    'users_router',
    'messages_router',
    'templates_router',
    'chat_router',
    'assistant_router',
]
