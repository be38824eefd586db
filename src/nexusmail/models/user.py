"""
User Model

Represents a registered user of the messaging platform.
Users are registered in the identity directory at startup and never change afterwards.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    """Role of a user"""
    ADMIN = "admin"       # Sends broadcasts, answers support chats
    MEMBER = "member"     # Reads mailbox, opens support chats


@dataclass(frozen=True)
class User:
    """
    User entity.

    Each user:
    - Has a stable string id ("admin-1", "user-1", ...)
    - Is either an ADMIN or a MEMBER
    - Can belong to a department (display only)
    """
    id: str
    display_name: str = ""                          # "Alice Chen"
    role: UserRole = UserRole.MEMBER
    department: Optional[str] = None
    email: str = ""
    avatar_url: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": self.id,
            "display_name": self.display_name,
            "role": self.role.value,
            "department": self.department,
            "email": self.email,
            "avatar_url": self.avatar_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Create from dictionary"""
        return cls(
            id=str(data["id"]),
            display_name=data.get("display_name") or data.get("name", ""),
            role=UserRole(data["role"]) if isinstance(data.get("role"), str) else data.get("role", UserRole.MEMBER),
            department=data.get("department"),
            email=data.get("email", ""),
            avatar_url=data.get("avatar_url") or data.get("avatar"),
        )
