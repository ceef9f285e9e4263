"""Domain entities exposed by the application."""

from .application import (
    APPLICATION_STATUS_HIRED,
    APPLICATION_STATUS_PENDING,
    APPLICATION_STATUS_REJECTED,
    APPLICATION_STATUS_REVIEWED,
    APPLICATION_STATUS_SHORTLISTED,
    ApplicationRecord,
    JobRecord,
)
from .conversation import (
    PREVIEW_LENGTH,
    ArchivedBy,
    Conversation,
    ConversationStatus,
    LastMessagePreview,
    UnreadCount,
    truncate_preview,
)
from .message import (
    MAX_CONTENT_LENGTH,
    Attachment,
    Message,
    MessageType,
    SystemMessageType,
)
from .notification import (
    MAX_MESSAGE_LENGTH,
    MAX_TITLE_LENGTH,
    Notification,
    NotificationPriority,
    NotificationType,
    RelatedRefs,
)
from .page import Page
from .participant import Identity, ParticipantKind, ParticipantRef, RecipientKind, Side

__all__ = [
    "APPLICATION_STATUS_HIRED",
    "APPLICATION_STATUS_PENDING",
    "APPLICATION_STATUS_REJECTED",
    "APPLICATION_STATUS_REVIEWED",
    "APPLICATION_STATUS_SHORTLISTED",
    "ApplicationRecord",
    "ArchivedBy",
    "Attachment",
    "Conversation",
    "ConversationStatus",
    "Identity",
    "JobRecord",
    "LastMessagePreview",
    "MAX_CONTENT_LENGTH",
    "MAX_MESSAGE_LENGTH",
    "MAX_TITLE_LENGTH",
    "Message",
    "MessageType",
    "Notification",
    "NotificationPriority",
    "NotificationType",
    "PREVIEW_LENGTH",
    "Page",
    "ParticipantKind",
    "ParticipantRef",
    "RecipientKind",
    "RelatedRefs",
    "Side",
    "SystemMessageType",
    "UnreadCount",
    "truncate_preview",
]
