"""Endpoints and websocket handler for notifications."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from jobchat.application.use_cases.notifications import NotificationDispatcher
from jobchat.domain.entities import Identity, Notification, NotificationType
from jobchat.domain.errors import MessagingError
from jobchat.infrastructure.database import SessionLocal
from jobchat.infrastructure.notifications import notification_manager, serialize_notification
from jobchat.infrastructure.repositories import NotificationRepository
from jobchat.interfaces.api.dependencies import (
    get_current_identity,
    get_notification_dispatcher,
    resolve_identity,
)
from jobchat.interfaces.api.schemas import (
    DeletedCountRead,
    Envelope,
    ModifiedCountRead,
    NotificationListData,
    NotificationRead,
    PaginationRead,
    UnreadNotificationsRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    related = notification.related
    return NotificationRead(
        id=notification.id or 0,
        recipient_id=notification.recipient_id,
        recipient_kind=notification.recipient_kind.value,
        type=notification.type.value,
        title=notification.title,
        message=notification.message,
        related_job=related.job_id,
        related_application=related.application_id,
        related_conversation=related.conversation_id,
        related_user=related.user_id,
        related_employer=related.employer_id,
        action_url=notification.action_url,
        priority=notification.priority.value,
        is_read=notification.is_read,
        read_at=notification.read_at,
        expires_at=notification.expires_at,
        metadata=notification.metadata or {},
        created_at=notification.created_at,
    )


@router.get("", response_model=Envelope[NotificationListData])
def list_notifications(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    type: NotificationType | None = Query(default=None),
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    caller: Identity = Depends(get_current_identity),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> Envelope[NotificationListData]:
    """Return the caller's live notifications, newest first."""

    notifications = dispatcher.list(
        caller.id,
        caller.ref.recipient_kind,
        page=page,
        limit=limit,
        type=type,
        unread_only=unread_only,
    )
    return Envelope(
        data=NotificationListData(
            notifications=[_notification_to_schema(n) for n in notifications.items],
            pagination=PaginationRead.from_page(notifications),
        )
    )


@router.get("/unread-count", response_model=Envelope[UnreadNotificationsRead])
def unread_count(
    caller: Identity = Depends(get_current_identity),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> Envelope[UnreadNotificationsRead]:
    count = dispatcher.unread_count(caller.id, caller.ref.recipient_kind)
    return Envelope(data=UnreadNotificationsRead(unread_count=count))


@router.put("/read-all", response_model=Envelope[ModifiedCountRead])
def mark_all_read(
    caller: Identity = Depends(get_current_identity),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> Envelope[ModifiedCountRead]:
    modified = dispatcher.mark_all_read(caller.id, caller.ref.recipient_kind)
    return Envelope(
        data=ModifiedCountRead(modified_count=modified),
        message="All notifications marked as read",
    )


@router.delete("/all", response_model=Envelope[DeletedCountRead])
def delete_all(
    caller: Identity = Depends(get_current_identity),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> Envelope[DeletedCountRead]:
    deleted = dispatcher.delete_all(caller.id, caller.ref.recipient_kind)
    return Envelope(
        data=DeletedCountRead(deleted_count=deleted),
        message="All notifications deleted",
    )


@router.put("/{notification_id}/read", response_model=Envelope[None])
def mark_read(
    notification_id: int,
    caller: Identity = Depends(get_current_identity),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> Envelope[None]:
    dispatcher.mark_read(
        notification_id, recipient_id=caller.id, recipient_kind=caller.ref.recipient_kind
    )
    return Envelope(message="Notification marked as read")


@router.delete("/{notification_id}", response_model=Envelope[None])
def delete_notification(
    notification_id: int,
    caller: Identity = Depends(get_current_identity),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> Envelope[None]:
    dispatcher.delete_one(
        notification_id, recipient_id=caller.id, recipient_kind=caller.ref.recipient_kind
    )
    return Envelope(message="Notification deleted")


def _acknowledge(identity: Identity, ids: list[Any]) -> None:
    session = SessionLocal()
    try:
        dispatcher = NotificationDispatcher(NotificationRepository(session))
        for notification_id in ids:
            if not isinstance(notification_id, int):
                continue
            try:
                dispatcher.mark_read(
                    notification_id,
                    recipient_id=identity.id,
                    recipient_kind=identity.ref.recipient_kind,
                )
            except MessagingError:
                logger.debug("Ignoring ack for unknown notification %s", notification_id)
    finally:
        session.close()


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream new notifications to the authenticated participant."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        identity = resolve_identity(token, session)
        pending = NotificationDispatcher(NotificationRepository(session)).list(
            identity.id, identity.ref.recipient_kind, unread_only=True
        )
    except MessagingError:
        await websocket.close(code=1008)
        return
    except Exception:
        logger.exception("Could not open notification stream")
        await websocket.close(code=1011)
        return
    finally:
        session.close()

    key = (identity.ref.recipient_kind, identity.id)
    await notification_manager.connect(key, websocket)
    try:
        await websocket.send_json(
            {"type": "init", "data": [serialize_notification(n) for n in pending.items]}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    _acknowledge(identity, ids)
                    await websocket.send_json({"type": "ack", "ids": ids})
    except WebSocketDisconnect:
        pass
    finally:
        notification_manager.disconnect(key, websocket)
