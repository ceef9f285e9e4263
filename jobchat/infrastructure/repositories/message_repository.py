"""Persistence helpers for message entities."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from sqlalchemy import desc, false
from sqlalchemy.orm import Session

from jobchat.domain.entities import (
    MAX_CONTENT_LENGTH,
    Attachment,
    Conversation,
    Message,
    MessageType,
    Page,
    ParticipantKind,
    ParticipantRef,
    SystemMessageType,
)
from jobchat.domain.errors import ConversationClosed, NotFound, ValidationError
from jobchat.infrastructure.models import MessageModel
from jobchat.utils import from_storage, storage_now


def normalize_content(content: str | None) -> str:
    """Return ``content`` trimmed, rejecting blank or oversized text."""

    text = (content or "").strip()
    if not text:
        raise ValidationError("Message content is required")
    if len(text) > MAX_CONTENT_LENGTH:
        raise ValidationError(
            f"Message cannot exceed {MAX_CONTENT_LENGTH} characters"
        )
    return text


class MessageRepository:
    """Provide storage operations for :class:`Message` objects.

    Writes are flushed into the current transaction; the calling use case
    commits once the conversation bookkeeping has been applied as well.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(
        self,
        conversation: Conversation,
        *,
        sender: ParticipantRef,
        content: str,
        type: MessageType = MessageType.TEXT,
        attachment: Attachment | None = None,
        system_message_type: SystemMessageType | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Message:
        text = normalize_content(content)
        if not conversation.is_active:
            raise ConversationClosed(
                "Cannot send messages to a closed or archived conversation"
            )
        if type is MessageType.SYSTEM and system_message_type is None:
            system_message_type = SystemMessageType.GENERAL
        if type is not MessageType.SYSTEM and system_message_type is not None:
            raise ValidationError("Only system messages carry a system message type")
        if type is MessageType.TEXT and attachment is not None:
            raise ValidationError("Text messages cannot carry attachments")

        model = MessageModel(
            conversation_id=conversation.id,
            sender_id=sender.id,
            sender_kind=sender.kind.value,
            content=text,
            type=type.value,
            attachment=asdict(attachment) if attachment else None,
            system_message_type=system_message_type.value if system_message_type else None,
            metadata_=metadata or {},
            is_read=False,
            is_deleted=False,
            created_at=storage_now(),
        )
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def get(self, message_id: int) -> Message | None:
        model = (
            self.session.query(MessageModel)
            .populate_existing()
            .filter(MessageModel.id == message_id)
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def latest(self, conversation_id: int) -> Message | None:
        model = (
            self._visible(conversation_id)
            .order_by(desc(MessageModel.created_at), desc(MessageModel.id))
            .first()
        )
        return self._to_entity(model) if model else None

    def list(self, conversation_id: int, *, page: int = 1, limit: int = 50) -> Page[Message]:
        """Return one page of messages, newest page first, each page oldest to newest."""

        query = self._visible(conversation_id)
        result: Page[Message] = Page(page=page, limit=limit, total=query.count())
        models = (
            query.order_by(desc(MessageModel.created_at), desc(MessageModel.id))
            .offset(result.offset)
            .limit(limit)
            .all()
        )
        result.items = [self._to_entity(model) for model in reversed(models)]
        return result

    def mark_all_read(self, conversation_id: int, reader: ParticipantRef) -> int:
        """Flag every message the other side sent to ``reader`` as read in one statement."""

        return (
            self.session.query(MessageModel)
            .filter(
                MessageModel.conversation_id == conversation_id,
                MessageModel.sender_kind != reader.kind.value,
                MessageModel.is_read == false(),
            )
            .update(
                {MessageModel.is_read: True, MessageModel.read_at: storage_now()},
                synchronize_session=False,
            )
        )

    def soft_delete(self, message_id: int) -> bool:
        """Hide ``message_id`` from listings.

        Returns ``True`` when the message was still unread at deletion time so
        the caller can release the recipient's unread counter.
        """

        values = {MessageModel.is_deleted: True, MessageModel.deleted_at: storage_now()}
        base = self.session.query(MessageModel).filter(
            MessageModel.id == message_id, MessageModel.is_deleted == false()
        )
        if base.filter(MessageModel.is_read == false()).update(
            values, synchronize_session=False
        ):
            return True
        if base.update(values, synchronize_session=False):
            return False
        raise NotFound("Message not found")

    def _visible(self, conversation_id: int):
        return (
            self.session.query(MessageModel)
            .populate_existing()
            .filter(
                MessageModel.conversation_id == conversation_id,
                MessageModel.is_deleted == false(),
            )
        )

    @staticmethod
    def _to_entity(model: MessageModel) -> Message:
        attachment = Attachment(**model.attachment) if model.attachment else None
        return Message(
            id=model.id,
            conversation_id=model.conversation_id,
            sender=ParticipantRef(ParticipantKind(model.sender_kind), model.sender_id),
            content=model.content,
            type=MessageType(model.type),
            attachment=attachment,
            system_message_type=(
                SystemMessageType(model.system_message_type)
                if model.system_message_type
                else None
            ),
            metadata=dict(model.metadata_ or {}),
            is_read=bool(model.is_read),
            read_at=from_storage(model.read_at),
            is_deleted=bool(model.is_deleted),
            deleted_at=from_storage(model.deleted_at),
            created_at=from_storage(model.created_at),
        )


__all__ = ["MessageRepository", "normalize_content"]
