"""
Template Service

Reusable drafts for the compose form.
"""
import logging
from typing import Iterable, List, Optional

from ..errors import NotFound, ValidationError
from ..models.message import Message, MessageKind, Priority
from ..models.template import Template
from ..storage.template_storage import TemplateStorage
from .mailbox_service import MailboxService

logger = logging.getLogger("nexusmail.services.template")


class TemplateService:
    """Service for template CRUD and compose-from-template"""

    def __init__(self, template_storage: TemplateStorage, mailbox: MailboxService):
        self.template_storage = template_storage
        self.mailbox = mailbox

    async def save(
        self,
        name: str,
        subject: str,
        content: str,
        priority: Priority = Priority.NORMAL,
    ) -> Template:
        """Save a draft as template"""
        for field_name, value in (("name", name), ("subject", subject), ("content", content)):
            if not value or not value.strip():
                raise ValidationError(f"Template {field_name} is required")

        template = Template(name=name.strip(), subject=subject.strip(), content=content, priority=priority)
        async with self.template_storage.lock:
            created = await self.template_storage.create(template)

        logger.info(f"Template saved: {created.name} ({created.id})")
        return created

    async def get(self, template_id: str) -> Template:
        """Get template by ID"""
        template = await self.template_storage.get_by_id(template_id)
        if not template:
            raise NotFound(f"Template '{template_id}' not found")
        return template

    async def list(self) -> List[Template]:
        """List templates by name"""
        return await self.template_storage.list_all()

    async def delete(self, template_id: str):
        """Delete template"""
        async with self.template_storage.lock:
            if not await self.template_storage.delete(template_id):
                raise NotFound(f"Template '{template_id}' not found")
        logger.info(f"Template deleted: {template_id}")

    async def compose_from(
        self,
        template_id: str,
        sender_id: str,
        recipient_target: str,
        kind: MessageKind = MessageKind.PERSONAL,
        tags: Optional[Iterable[str]] = None,
    ) -> Message:
        """Send a new message with the template's subject, content and priority"""
        template = await self.get(template_id)
        return await self.mailbox.send(
            sender_id=sender_id,
            recipient_target=recipient_target,
            subject=template.subject,
            content=template.content,
            kind=kind,
            priority=template.priority,
            tags=tags,
        )
