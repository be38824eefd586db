"""
Engine Service

Main composite service that owns all storages and services.
Singleton pattern - one instance per process.
"""
import logging
from pathlib import Path
from typing import Optional

from ..config import Config
from ..llm.providers.base import BaseLLMProvider
from ..llm.providers.ollama import OllamaProvider
from ..storage.user_storage import UserStorage
from ..storage.message_storage import MessageStorage
from ..storage.template_storage import TemplateStorage
from ..storage.chat_storage import ChatSessionStorage, ChatMessageStorage
from .directory_service import DirectoryService
from .mailbox_service import MailboxService
from .template_service import TemplateService
from .chat_service import ChatService
from .assistant_service import AssistantService
from .prompt_cache import PromptCache

logger = logging.getLogger("nexusmail.services.engine")

# Singleton instance
_engine_service: Optional["EngineService"] = None


class EngineService:
    """
    Composite engine service.

    Manages:
    - All in-memory storages
    - Business logic services
    - Draft assistant gateway
    - Graceful shutdown
    """

    def __init__(
        self,
        llm_provider: Optional[BaseLLMProvider] = None,
        seed_path: Optional[Path] = None,
        assistant_enabled: Optional[bool] = None,
    ):
        """Initialize engine service with all storages"""
        self.seed_path = seed_path if seed_path is not None else Config.get_seed_path()

        # Initialize storages
        self.user_storage = UserStorage()
        self.message_storage = MessageStorage()
        self.template_storage = TemplateStorage()
        self.chat_session_storage = ChatSessionStorage()
        self.chat_message_storage = ChatMessageStorage()

        # Initialize services (after storages)
        self.directory_service = DirectoryService(self.user_storage)
        self.mailbox_service = MailboxService(self.message_storage, self.directory_service)
        self.template_service = TemplateService(self.template_storage, self.mailbox_service)
        self.chat_service = ChatService(
            session_storage=self.chat_session_storage,
            message_storage=self.chat_message_storage,
            directory=self.directory_service,
            preview_chars=Config.CHAT_PREVIEW_CHARS,
        )

        # Draft assistant (prompts dir lives inside the package)
        enabled = Config.ASSISTANT_ENABLED if assistant_enabled is None else assistant_enabled
        if llm_provider is None and enabled:
            llm_provider = OllamaProvider(timeout=Config.ASSISTANT_TIMEOUT)
        self.prompt_cache = PromptCache(str(Path(__file__).parent.parent / "prompts"))
        self.assistant_service = AssistantService(
            llm_provider=llm_provider,
            prompt_cache=self.prompt_cache,
            timeout=Config.ASSISTANT_TIMEOUT,
            enabled=enabled,
            summary_max_chars=Config.SUMMARY_MAX_CHARS,
        )

        self._initialized = False
        logger.info("EngineService created")

    @property
    def storages(self):
        return (
            self.user_storage,
            self.message_storage,
            self.template_storage,
            self.chat_session_storage,
            self.chat_message_storage,
        )

    async def initialize(self):
        """Initialize all storages and load the identity directory"""
        if self._initialized:
            logger.info("EngineService already initialized")
            return

        logger.info("Initializing EngineService...")

        for storage in self.storages:
            await storage.init()

        users = await self.directory_service.load_seed(self.seed_path)
        logger.info(f"Identity directory loaded: {len(users)} users")

        self._initialized = True
        logger.info("EngineService initialized successfully")

    async def close(self):
        """Close all storages and the assistant client"""
        logger.info("Closing EngineService...")

        for storage in self.storages:
            await storage.close()
        await self.assistant_service.close()

        self._initialized = False
        logger.info("EngineService closed")

    @property
    def is_initialized(self) -> bool:
        """Check if service is initialized"""
        return self._initialized


def get_engine_service() -> EngineService:
    """Get or create engine service singleton"""
    global _engine_service
    if _engine_service is None:
        _engine_service = EngineService()
    return _engine_service


def set_engine_service(service: Optional[EngineService]):
    """Replace the singleton (tests, embedding applications)"""
    global _engine_service
    _engine_service = service


async def init_engine_service() -> EngineService:
    """Initialize and return engine service"""
    service = get_engine_service()
    await service.initialize()
    return service
