"""
Base Storage

Base class for in-memory storages.

Each storage owns one asyncio.Lock. Services hold the lock around every
mutation so writes to a storage are serialized; cross-storage operations
take locks in a fixed order (see ChatService).
"""
import asyncio
import logging
import time

logger = logging.getLogger("nexusmail.storage")


class BaseStorage:
    """Base storage class with a per-storage write lock"""

    def __init__(self):
        self.lock = asyncio.Lock()
        self._initialized = False
        self._reset()

    async def init(self):
        """Initialize storage"""
        if self._initialized:
            return

        start_time = time.time()
        self._initialized = True

        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.info(f"{self.__class__.__name__} initialized in {duration_ms}ms")

    async def close(self):
        """Drop all records"""
        self._reset()
        self._initialized = False
        logger.info(f"{self.__class__.__name__} closed")

    def _reset(self):
        """Clear in-memory state. Subclasses override."""

    @property
    def is_initialized(self) -> bool:
        return self._initialized
