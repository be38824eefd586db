"""
Prompt Cache

In-memory cache for assistant prompt files.
Reads prompts from disk on first access, caches in memory.
Supports cache clear without restart.
"""
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger("nexusmail.services.prompt_cache")


class PromptCache:
    """
    Cache for system prompts stored as files.

    Prompts are read from disk on first access and cached in memory.
    """

    def __init__(self, prompts_dir: str):
        self._cache: dict[str, str] = {}
        self._prompts_dir = prompts_dir

    def get_prompt(self, prompt_file: str, default: str = "") -> str:
        """
        Get prompt text.

        Args:
            prompt_file: File name inside the prompts directory
            default: Text used when the file is missing (not cached)

        Returns:
            Prompt text
        """
        if prompt_file not in self._cache:
            path = os.path.join(self._prompts_dir, prompt_file)
            try:
                self._cache[prompt_file] = Path(path).read_text(encoding="utf-8").strip()
                logger.info(f"Loaded prompt from file: {prompt_file}")
            except FileNotFoundError:
                logger.warning(f"Prompt file not found: {path}, using built-in prompt")
                return default
        return self._cache[prompt_file]

    def clear(self, prompt_file: Optional[str] = None):
        """
        Clear cached prompts.

        Args:
            prompt_file: If provided, clear only this file's cache.
                        If None, clear entire cache.
        """
        if prompt_file:
            self._cache.pop(prompt_file, None)
            logger.info(f"Cleared prompt cache for: {prompt_file}")
        else:
            count = len(self._cache)
            self._cache.clear()
            logger.info(f"Cleared entire prompt cache ({count} entries)")

    @property
    def cached_count(self) -> int:
        """Number of cached prompts"""
        return len(self._cache)
