"""Domain entity representing a message inside a conversation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .participant import ParticipantRef

MAX_CONTENT_LENGTH = 5000


class MessageType(str, Enum):
    TEXT = "text"
    FILE = "file"
    IMAGE = "image"
    SYSTEM = "system"


class SystemMessageType(str, Enum):
    STATUS_CHANGE = "status_change"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    OFFER_MADE = "offer_made"
    GENERAL = "general"


@dataclass
class Attachment:
    filename: str
    original_name: str | None = None
    mimetype: str | None = None
    size: int | None = None
    url: str | None = None


@dataclass
class Message:
    id: int | None
    conversation_id: int
    sender: ParticipantRef
    content: str
    type: MessageType = MessageType.TEXT
    attachment: Attachment | None = None
    system_message_type: SystemMessageType | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    read_at: datetime | None = None
    is_deleted: bool = False
    deleted_at: datetime | None = None
    created_at: datetime | None = None


__all__ = [
    "Attachment",
    "MAX_CONTENT_LENGTH",
    "Message",
    "MessageType",
    "SystemMessageType",
]
