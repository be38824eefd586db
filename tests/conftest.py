"""Test fixtures for NexusMail Engine."""

import os

import pytest

# Set test environment before importing app modules
os.environ.setdefault("ASSISTANT_ENABLED", "false")
os.environ.setdefault("DIRECTORY_SEED_FILE", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from nexusmail.models import User, UserRole
from nexusmail.services.engine_service import EngineService

ADMIN = "admin-1"
ALICE = "user-1"
BOB = "user-2"


@pytest.fixture
async def engine():
    """Fresh engine with the demo directory (admin-1, user-1, user-2)."""
    service = EngineService(assistant_enabled=False)
    await service.initialize()
    yield service
    await service.close()


@pytest.fixture
def mailbox(engine):
    return engine.mailbox_service


@pytest.fixture
def chat(engine):
    return engine.chat_service


@pytest.fixture
def templates(engine):
    return engine.template_service


@pytest.fixture
async def carol(engine):
    """Extra member in another department."""
    return await engine.directory_service.register(
        User(id="user-3", display_name="Carol Diaz", role=UserRole.MEMBER, department="Finance")
    )
