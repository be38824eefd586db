"""
User Storage

In-memory identity directory records.
"""
import logging
from typing import Dict, List, Optional

from .base import BaseStorage
from ..models.user import User, UserRole

logger = logging.getLogger("nexusmail.storage.user")


class UserStorage(BaseStorage):
    """Storage for User entities"""

    def _reset(self):
        self._users: Dict[str, User] = {}

    async def create(self, user: User) -> User:
        """Register a user"""
        self._users[user.id] = user
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        return self._users.get(user_id)

    async def exists(self, user_id: str) -> bool:
        """Check if user id is registered"""
        return user_id in self._users

    async def list_all(self, role: Optional[UserRole] = None) -> List[User]:
        """List users in registration order, optionally by role"""
        users = list(self._users.values())
        if role is not None:
            users = [u for u in users if u.role == role]
        return users
