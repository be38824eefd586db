"""
Template Storage

In-memory storage for message templates.
"""
import logging
from typing import Dict, List, Optional

from .base import BaseStorage
from ..models.template import Template

logger = logging.getLogger("nexusmail.storage.template")


class TemplateStorage(BaseStorage):
    """Storage for Template entities"""

    def _reset(self):
        self._templates: Dict[str, Template] = {}

    async def create(self, template: Template) -> Template:
        """Store a new template"""
        self._templates[template.id] = template
        return template

    async def get_by_id(self, template_id: str) -> Optional[Template]:
        """Get template by ID"""
        return self._templates.get(template_id)

    async def list_all(self) -> List[Template]:
        """List templates ordered by name"""
        return sorted(self._templates.values(), key=lambda t: (t.name.lower(), t.id))

    async def delete(self, template_id: str) -> bool:
        """Delete template"""
        return self._templates.pop(template_id, None) is not None
