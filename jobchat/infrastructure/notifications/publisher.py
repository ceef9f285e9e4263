"""Push freshly stored notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from jobchat.domain.entities import Notification

from .manager import NotificationConnectionManager, RecipientKey, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task] = set()

    def dispatch(self, notification: Notification) -> None:
        """Schedule ``notification`` for delivery; a no-op when nobody listens."""

        key: RecipientKey = (notification.recipient_kind, notification.recipient_id)
        if not self._manager.is_connected(key):
            return

        message = {"type": "notification", "data": serialize_notification(notification)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Sync route handlers run in an anyio worker thread.
            from_thread.run(self._manager.send, key, message)
        else:
            task = loop.create_task(self._manager.send(key, message))
            self._pending.add(task)
            task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Realtime delivery failed", exc_info=task.exception())


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    related = notification.related
    return {
        "id": notification.id,
        "recipientId": notification.recipient_id,
        "recipientKind": notification.recipient_kind.value,
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "relatedJob": related.job_id,
        "relatedApplication": related.application_id,
        "relatedConversation": related.conversation_id,
        "relatedUser": related.user_id,
        "relatedEmployer": related.employer_id,
        "actionUrl": notification.action_url,
        "priority": notification.priority.value,
        "isRead": notification.is_read,
        "metadata": notification.metadata or {},
        "createdAt": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "expiresAt": notification.expires_at.isoformat()
        if notification.expires_at
        else None,
    }


notification_publisher = NotificationPublisher(notification_manager)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
