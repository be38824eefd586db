"""
NexusMail Services

Business logic services for NexusMail.
"""
from .engine_service import EngineService
from .directory_service import DirectoryService
from .mailbox_service import MailboxService
from .template_service import TemplateService
from .chat_service import ChatService
from .assistant_service import AssistantService
from .prompt_cache import PromptCache

__all__ = [
    'EngineService',
    'DirectoryService',
    'MailboxService',
    'TemplateService',
    'ChatService',
    'AssistantService',
    'PromptCache',
]
