"""
Mailbox Service

Business logic for mailbox messages: send, per-viewer read/star state,
recall, filtered listings and unread counts.

Visibility rule: a message is visible to actor A iff it is addressed to A
or to EVERYONE. The sender always sees their own messages as read, so they
never count toward the sender's unread count.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ..errors import NotFound, PermissionDenied, ValidationError
from ..models.message import EVERYONE, Message, MessageFilter, MessageKind, Priority
from ..storage.message_storage import MessageStorage
from .directory_service import DirectoryService

logger = logging.getLogger("nexusmail.services.mailbox")


class MailboxService:
    """Service for mailbox operations"""

    def __init__(self, message_storage: MessageStorage, directory: DirectoryService):
        self.message_storage = message_storage
        self.directory = directory

    async def send(
        self,
        sender_id: str,
        recipient_target: str,
        subject: str,
        content: str,
        kind: MessageKind = MessageKind.PERSONAL,
        priority: Priority = Priority.NORMAL,
        tags: Optional[Iterable[str]] = None,
        scheduled_for: Optional[datetime] = None,
    ) -> Message:
        """
        Send a message.

        Scheduled messages are stored right away with scheduled_for set;
        holding them back until delivery time is up to the caller.

        Raises:
            ValidationError: Empty subject/content, unknown sender/recipient,
                kind not matching the recipient
            PermissionDenied: Non-admin sending a system or broadcast message
        """
        if not subject or not subject.strip():
            raise ValidationError("Subject is required")
        if not content or not content.strip():
            raise ValidationError("Content is required")

        sender = await self.directory.resolve_user(sender_id)
        if not sender:
            raise ValidationError(f"Unknown sender '{sender_id}'")

        if recipient_target != EVERYONE and not await self.directory.resolve_user(recipient_target):
            raise ValidationError(f"Unknown recipient '{recipient_target}'")

        if kind == MessageKind.BROADCAST and recipient_target != EVERYONE:
            raise ValidationError("Broadcast messages must target everyone")
        if kind == MessageKind.PERSONAL and recipient_target == EVERYONE:
            raise ValidationError("Personal messages must target a single user")
        if kind in (MessageKind.SYSTEM, MessageKind.BROADCAST) and not sender.is_admin:
            raise PermissionDenied(f"Only admins can send {kind.value} messages")

        message = Message(
            sender_id=sender_id,
            recipient_target=recipient_target,
            subject=subject.strip(),
            content=content,
            kind=kind,
            priority=priority,
            is_read=False,
            is_starred=False,
            created_at=datetime.now(timezone.utc),
            tags=frozenset(t.strip() for t in (tags or ()) if t and t.strip()),
            scheduled_for=scheduled_for,
        )

        async with self.message_storage.lock:
            created = await self.message_storage.create(message)

        logger.info(f"Message {created.id} sent by {sender_id} to {recipient_target} ({kind.value})")
        return created

    async def get_for(self, message_id: str, actor_id: str) -> Message:
        """Get a message as seen by actor"""
        async with self.message_storage.lock:
            message = await self._get_visible(message_id, actor_id)
            return await self._project(message, actor_id)

    async def mark_read(self, message_id: str, actor_id: str) -> Message:
        """Mark message read for actor (no-op if already read)"""
        return await self._set_read(message_id, actor_id, True)

    async def mark_unread(self, message_id: str, actor_id: str) -> Message:
        """Mark message unread for actor (no-op if already unread)"""
        return await self._set_read(message_id, actor_id, False)

    async def mark_all_read_for_actor(self, actor_id: str) -> int:
        """
        Mark every message visible to actor as read.

        Returns:
            Number of messages that were unread before the call
        """
        async with self.message_storage.lock:
            changed = 0
            for message in await self.message_storage.list_all():
                if not message.is_visible_to(actor_id):
                    continue
                snapshot = await self._project(message, actor_id)
                if not snapshot.is_read:
                    await self.message_storage.set_read(message.id, actor_id, True)
                    changed += 1

        logger.info(f"Marked {changed} messages read for {actor_id}")
        return changed

    async def toggle_star(self, message_id: str, actor_id: str) -> Message:
        """Flip starred flag for actor"""
        async with self.message_storage.lock:
            message = await self._get_visible(message_id, actor_id)
            flags = await self.message_storage.get_flags(message_id, actor_id)
            await self.message_storage.set_starred(message_id, actor_id, not flags.is_starred)
            return await self._project(message, actor_id)

    async def delete(self, message_id: str, actor_id: str):
        """
        Recall a message: removes it from every viewer.
        Only the sender may recall their message.

        Raises:
            NotFound: If the message does not exist (including a second recall)
            PermissionDenied: If actor is not the sender
        """
        async with self.message_storage.lock:
            message = await self.message_storage.get_by_id(message_id)
            if not message:
                raise NotFound(f"Message '{message_id}' not found")
            if message.sender_id != actor_id:
                raise PermissionDenied(f"Only the sender can recall message '{message_id}'")
            await self.message_storage.delete(message_id)

        logger.info(f"Message {message_id} recalled by {actor_id}")

    recall = delete

    async def list_for(
        self,
        actor_id: str,
        filter_by: MessageFilter = MessageFilter.ALL,
        search_term: Optional[str] = None,
    ) -> List[Message]:
        """List messages visible to actor, newest first"""
        async with self.message_storage.lock:
            return await self._list_for(actor_id, filter_by, search_term)

    async def unread_count(self, actor_id: str) -> int:
        """Number of unread messages visible to actor"""
        async with self.message_storage.lock:
            return len(await self._list_for(actor_id, MessageFilter.UNREAD))

    async def list_sent(self, sender_id: str) -> List[Message]:
        """Outbox of a sender, newest first"""
        async with self.message_storage.lock:
            return [
                await self._project(m, sender_id)
                for m in await self.message_storage.list_all()
                if m.sender_id == sender_id
            ]

    async def stats(self) -> dict:
        """
        Overview numbers for the admin dashboard.

        read_rate is the percentage of (message, recipient) pairs that are read.
        A broadcast has one pair per registered user other than the sender.
        """
        users = await self.directory.list_users()
        async with self.message_storage.lock:
            messages = await self.message_storage.list_all()
            pairs = 0
            read_pairs = 0
            for message in messages:
                if message.is_broadcast:
                    recipients = [u.id for u in users if u.id != message.sender_id]
                else:
                    recipients = [message.recipient_target]
                for recipient_id in recipients:
                    pairs += 1
                    flags = await self.message_storage.get_flags(message.id, recipient_id)
                    if flags.is_read:
                        read_pairs += 1

        def count_kind(kind: MessageKind) -> int:
            return sum(1 for m in messages if m.kind == kind)

        return {
            "total_messages": len(messages),
            "broadcast_count": count_kind(MessageKind.BROADCAST),
            "system_count": count_kind(MessageKind.SYSTEM),
            "personal_count": count_kind(MessageKind.PERSONAL),
            "active_users": len(users),
            "read_rate": round(read_pairs * 100 / pairs) if pairs else 0,
        }

    # Internals (caller holds message_storage.lock)

    async def _list_for(
        self,
        actor_id: str,
        filter_by: MessageFilter = MessageFilter.ALL,
        search_term: Optional[str] = None,
    ) -> List[Message]:
        result = []
        for message in await self.message_storage.list_all():
            if not message.is_visible_to(actor_id):
                continue
            if search_term and not message.matches(search_term):
                continue
            snapshot = await self._project(message, actor_id)
            if filter_by == MessageFilter.UNREAD and snapshot.is_read:
                continue
            if filter_by == MessageFilter.STARRED and not snapshot.is_starred:
                continue
            if filter_by == MessageFilter.SYSTEM and snapshot.kind not in (MessageKind.SYSTEM, MessageKind.BROADCAST):
                continue
            result.append(snapshot)
        return result

    async def _get_visible(self, message_id: str, actor_id: str) -> Message:
        message = await self.message_storage.get_by_id(message_id)
        if not message or not message.is_visible_to(actor_id):
            raise NotFound(f"Message '{message_id}' not found")
        return message

    async def _project(self, message: Message, actor_id: str) -> Message:
        flags = await self.message_storage.get_flags(message.id, actor_id)
        is_read = flags.is_read or message.sender_id == actor_id
        return message.project(is_read=is_read, is_starred=flags.is_starred)

    async def _set_read(self, message_id: str, actor_id: str, is_read: bool) -> Message:
        async with self.message_storage.lock:
            message = await self._get_visible(message_id, actor_id)
            await self.message_storage.set_read(message_id, actor_id, is_read)
            return await self._project(message, actor_id)
