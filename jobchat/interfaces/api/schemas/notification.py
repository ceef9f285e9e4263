"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from .common import ApiModel, PaginationRead


class NotificationRead(ApiModel):
    """Representation of a notification delivered to the client."""

    id: int
    recipient_id: int
    recipient_kind: str
    type: str
    title: str
    message: str
    related_job: int | None = None
    related_application: int | None = None
    related_conversation: int | None = None
    related_user: int | None = None
    related_employer: int | None = None
    action_url: str | None = None
    priority: str
    is_read: bool
    read_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None


class NotificationListData(ApiModel):
    notifications: list[NotificationRead]
    pagination: PaginationRead


class UnreadNotificationsRead(ApiModel):
    unread_count: int


class ModifiedCountRead(ApiModel):
    modified_count: int


class DeletedCountRead(ApiModel):
    deleted_count: int


__all__ = [
    "DeletedCountRead",
    "ModifiedCountRead",
    "NotificationListData",
    "NotificationRead",
    "UnreadNotificationsRead",
]
