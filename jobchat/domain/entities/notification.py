"""Domain entity representing a notification delivered to one participant."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .participant import RecipientKind

MAX_TITLE_LENGTH = 200
MAX_MESSAGE_LENGTH = 1000


class NotificationType(str, Enum):
    # application lifecycle
    APPLICATION_RECEIVED = "application_received"
    APPLICATION_VIEWED = "application_viewed"
    APPLICATION_STATUS_CHANGED = "application_status_changed"
    APPLICATION_WITHDRAWN = "application_withdrawn"
    # messaging
    NEW_MESSAGE = "new_message"
    CONVERSATION_STARTED = "conversation_started"
    # job lifecycle
    JOB_POSTED = "job_posted"
    JOB_EXPIRING = "job_expiring"
    JOB_EXPIRED = "job_expired"
    JOB_MATCH = "job_match"
    # account
    PROFILE_INCOMPLETE = "profile_incomplete"
    ACCOUNT_VERIFIED = "account_verified"
    PASSWORD_CHANGED = "password_changed"
    # interview
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW_REMINDER = "interview_reminder"
    INTERVIEW_CANCELLED = "interview_cancelled"
    # system
    SYSTEM_ANNOUNCEMENT = "system_announcement"
    MAINTENANCE_NOTICE = "maintenance_notice"
    WELCOME = "welcome"


class NotificationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


@dataclass
class RelatedRefs:
    """Optional navigation references; never used for integrity checks."""

    job_id: int | None = None
    application_id: int | None = None
    conversation_id: int | None = None
    user_id: int | None = None
    employer_id: int | None = None


@dataclass
class Notification:
    """Standalone alert addressed to an applicant or an employer."""

    id: int | None
    recipient_id: int
    recipient_kind: RecipientKind
    type: NotificationType
    title: str
    message: str
    related: RelatedRefs = field(default_factory=RelatedRefs)
    action_url: str | None = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    is_read: bool = False
    read_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None


__all__ = [
    "MAX_MESSAGE_LENGTH",
    "MAX_TITLE_LENGTH",
    "Notification",
    "NotificationPriority",
    "NotificationType",
    "RelatedRefs",
]
