"""Pydantic models describing message payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from .common import ApiModel, PaginationRead


class AttachmentSchema(ApiModel):
    filename: str
    original_name: str | None = None
    mimetype: str | None = None
    size: int | None = Field(default=None, ge=0)
    url: str | None = None


class SendMessageRequest(ApiModel):
    content: str
    type: Literal["text", "file", "image"] = "text"
    attachment: AttachmentSchema | None = None


class MessageRead(ApiModel):
    id: int
    conversation_id: int
    sender_id: int
    sender_kind: str
    content: str
    type: str
    attachment: AttachmentSchema | None = None
    system_message_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime | None = None


class MessageData(ApiModel):
    message: MessageRead


class MessageListData(ApiModel):
    messages: list[MessageRead]
    pagination: PaginationRead


__all__ = [
    "AttachmentSchema",
    "MessageData",
    "MessageListData",
    "MessageRead",
    "SendMessageRequest",
]
