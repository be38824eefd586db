"""
NexusMail Engine Configuration

Configuration class for the messaging and support-chat engine.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


class Config:
    """Configuration class for NexusMail Engine API"""

    # Base paths
    BASE_DIR = Path(__file__).parent.parent.parent
    DATA_DIR = BASE_DIR / "data"

    # Identity directory seed (JSON list of users); demo users when empty
    DIRECTORY_SEED_FILE = os.getenv("DIRECTORY_SEED_FILE", "")

    # API settings
    API_HOST = os.getenv("API_HOST", "127.0.0.1")
    API_PORT = int(os.getenv("API_PORT", "8100"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # LLM settings (draft assistant)
    LLM_BASE_URL = os.getenv("LLM_BASE_URL", "http://localhost:11434")  # Ollama default
    DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "qwen2:0.5b")
    ASSISTANT_ENABLED = os.getenv("ASSISTANT_ENABLED", "true").lower() == "true"
    ASSISTANT_TIMEOUT = float(os.getenv("ASSISTANT_TIMEOUT", "15"))
    SUMMARY_MAX_CHARS = int(os.getenv("SUMMARY_MAX_CHARS", "280"))

    # Chat
    CHAT_PREVIEW_CHARS = int(os.getenv("CHAT_PREVIEW_CHARS", "100"))

    @staticmethod
    def get_seed_path() -> Path | None:
        """Get directory seed file path, relative paths resolved against DATA_DIR"""
        if not Config.DIRECTORY_SEED_FILE:
            return None
        path = Path(Config.DIRECTORY_SEED_FILE)
        return path if path.is_absolute() else Config.DATA_DIR / path
