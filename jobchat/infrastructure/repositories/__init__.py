"""Repository implementations for infrastructure layer."""

from .conversation_repository import ConversationRepository
from .directory_repository import DirectoryRepository
from .message_repository import MessageRepository, normalize_content
from .notification_repository import NotificationRepository

__all__ = [
    "ConversationRepository",
    "DirectoryRepository",
    "MessageRepository",
    "NotificationRepository",
    "normalize_content",
]
