"""
Directory Service

Identity directory: static registry of users, loaded at startup.
"""
import json
import logging
from pathlib import Path
from typing import List, Optional

from ..errors import NotFound, PermissionDenied, ValidationError
from ..models.user import User, UserRole
from ..storage.user_storage import UserStorage

logger = logging.getLogger("nexusmail.services.directory")

DEMO_USERS = [
    User(id="admin-1", display_name="System Admin", role=UserRole.ADMIN,
         email="admin@nexus.com", avatar_url="https://picsum.photos/id/1/200/200"),
    User(id="user-1", display_name="Alice Chen", role=UserRole.MEMBER,
         email="alice@nexus.com", avatar_url="https://picsum.photos/id/64/200/200"),
    User(id="user-2", display_name="Bob Smith", role=UserRole.MEMBER,
         email="bob@nexus.com", avatar_url="https://picsum.photos/id/91/200/200"),
]


class DirectoryService:
    """Service for user lookups and role gating"""

    def __init__(self, user_storage: UserStorage):
        self.user_storage = user_storage

    async def register(self, user: User) -> User:
        """
        Register a user.

        Raises:
            ValidationError: If the id is empty or already registered
        """
        if not user.id or not user.id.strip():
            raise ValidationError("User id is required")

        async with self.user_storage.lock:
            if await self.user_storage.exists(user.id):
                raise ValidationError(f"User '{user.id}' already registered")
            created = await self.user_storage.create(user)

        logger.info(f"Registered user: {created.display_name} ({created.id}, {created.role.value})")
        return created

    async def load_seed(self, path: Optional[Path] = None) -> List[User]:
        """Register users from a JSON seed file, or the demo users when no file is given"""
        if path is None:
            users = list(DEMO_USERS)
        else:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
            users = [User.from_dict(item) for item in data]
            logger.info(f"Loaded {len(users)} users from {path}")

        return [await self.register(user) for user in users]

    async def resolve_user(self, user_id: str) -> Optional[User]:
        """Get user by ID, None if unknown"""
        return await self.user_storage.get_by_id(user_id)

    async def get_user(self, user_id: str) -> User:
        """Get user by ID, raises NotFound if unknown"""
        user = await self.user_storage.get_by_id(user_id)
        if not user:
            raise NotFound(f"User '{user_id}' not found")
        return user

    async def list_users(self, role: Optional[UserRole] = None) -> List[User]:
        """List registered users"""
        return await self.user_storage.list_all(role)

    async def require_admin(self, user_id: str) -> User:
        """Get user and check admin role"""
        user = await self.get_user(user_id)
        if not user.is_admin:
            raise PermissionDenied("Admin access required")
        return user
