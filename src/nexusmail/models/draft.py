"""
Draft Model

Output of the draft assistant.
"""
from dataclasses import dataclass
from enum import Enum


class Tone(str, Enum):
    """Tone requested for an announcement draft"""
    FORMAL = "formal"
    FRIENDLY = "friendly"
    URGENT = "urgent"


@dataclass(frozen=True)
class Draft:
    """Generated (or fallback) announcement draft"""
    subject: str
    content: str
    generated: bool = False     # False when the canned fallback was used

    def to_dict(self) -> dict:
        return {"subject": self.subject, "content": self.content, "generated": self.generated}
