"""
Template Model

Reusable message draft saved from the compose form.
"""
from dataclasses import dataclass, field
from uuid import uuid4

from .message import Priority


@dataclass(frozen=True)
class Template:
    """
    Template entity.

    Using a template copies its fields into a new message;
    messages never keep a reference back to the template.
    """
    id: str = field(default_factory=lambda: str(uuid4()))
    name: str = ""
    subject: str = ""
    content: str = ""
    priority: Priority = Priority.NORMAL

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": self.id,
            "name": self.name,
            "subject": self.subject,
            "content": self.content,
            "priority": self.priority.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Template":
        """Create from dictionary"""
        return cls(
            id=data.get("id") or str(uuid4()),
            name=data.get("name", ""),
            subject=data.get("subject", ""),
            content=data.get("content", ""),
            priority=Priority(data["priority"]) if isinstance(data.get("priority"), str) else data.get("priority", Priority.NORMAL),
        )
