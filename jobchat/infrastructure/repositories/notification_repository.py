"""Persistence helpers for notification entities."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import desc, false, or_, true
from sqlalchemy.orm import Session

from jobchat.domain.entities import (
    Notification,
    NotificationPriority,
    NotificationType,
    Page,
    RecipientKind,
    RelatedRefs,
)
from jobchat.infrastructure.models import NotificationModel
from jobchat.utils import from_storage, storage_now, to_storage


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get_for_recipient(
        self, notification_id: int, *, recipient_id: int, recipient_kind: RecipientKind
    ) -> Notification | None:
        model = (
            self._for_recipient(recipient_id, recipient_kind)
            .populate_existing()
            .filter(NotificationModel.id == notification_id)
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def list_for_recipient(
        self,
        recipient_id: int,
        recipient_kind: RecipientKind,
        *,
        page: int = 1,
        limit: int = 20,
        type: NotificationType | None = None,
        unread_only: bool = False,
        now: datetime | None = None,
    ) -> Page[Notification]:
        query = self._live(recipient_id, recipient_kind, now=now)
        if type is not None:
            query = query.filter(NotificationModel.type == type.value)
        if unread_only:
            query = query.filter(NotificationModel.is_read == false())

        result: Page[Notification] = Page(page=page, limit=limit, total=query.count())
        models = (
            query.populate_existing()
            .order_by(desc(NotificationModel.created_at), desc(NotificationModel.id))
            .offset(result.offset)
            .limit(limit)
            .all()
        )
        result.items = [self._to_entity(model) for model in models]
        return result

    def count_unread(
        self,
        recipient_id: int,
        recipient_kind: RecipientKind,
        *,
        now: datetime | None = None,
    ) -> int:
        return (
            self._live(recipient_id, recipient_kind, now=now)
            .filter(NotificationModel.is_read == false())
            .count()
        )

    def mark_as_read(
        self, notification_id: int, *, recipient_id: int, recipient_kind: RecipientKind
    ) -> bool:
        """Mark one notification read; returns ``False`` when the recipient does not own it."""

        if self.get_for_recipient(
            notification_id, recipient_id=recipient_id, recipient_kind=recipient_kind
        ) is None:
            return False
        self._for_recipient(recipient_id, recipient_kind).filter(
            NotificationModel.id == notification_id,
            NotificationModel.is_read == false(),
        ).update(
            {NotificationModel.is_read: True, NotificationModel.read_at: storage_now()},
            synchronize_session=False,
        )
        self.session.commit()
        return True

    def mark_all_as_read(self, recipient_id: int, recipient_kind: RecipientKind) -> int:
        updated = (
            self._for_recipient(recipient_id, recipient_kind)
            .filter(NotificationModel.is_read == false())
            .update(
                {NotificationModel.is_read: True, NotificationModel.read_at: storage_now()},
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def delete(
        self, notification_id: int, *, recipient_id: int, recipient_kind: RecipientKind
    ) -> bool:
        deleted = (
            self._for_recipient(recipient_id, recipient_kind)
            .filter(NotificationModel.id == notification_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return bool(deleted)

    def delete_all(self, recipient_id: int, recipient_kind: RecipientKind) -> int:
        deleted = self._for_recipient(recipient_id, recipient_kind).delete(
            synchronize_session=False
        )
        self.session.commit()
        return deleted

    def delete_expired(self, now: datetime) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.expires_at.is_not(None),
                NotificationModel.expires_at <= to_storage(now),
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def delete_read_older_than(self, cutoff: datetime) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.is_read == true(),
                NotificationModel.created_at < to_storage(cutoff),
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _for_recipient(self, recipient_id: int, recipient_kind: RecipientKind):
        return self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == recipient_id,
            NotificationModel.recipient_kind == recipient_kind.value,
        )

    def _live(
        self,
        recipient_id: int,
        recipient_kind: RecipientKind,
        *,
        now: datetime | None,
    ):
        """Notifications of the recipient that have not expired yet."""

        cutoff = to_storage(now) if now is not None else storage_now()
        return self._for_recipient(recipient_id, recipient_kind).filter(
            or_(
                NotificationModel.expires_at.is_(None),
                NotificationModel.expires_at > cutoff,
            )
        )

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        related = notification.related or RelatedRefs()
        model.recipient_id = notification.recipient_id
        model.recipient_kind = notification.recipient_kind.value
        model.type = notification.type.value
        model.title = notification.title
        model.message = notification.message
        model.related_job_id = related.job_id
        model.related_application_id = related.application_id
        model.related_conversation_id = related.conversation_id
        model.related_user_id = related.user_id
        model.related_employer_id = related.employer_id
        model.action_url = notification.action_url
        model.priority = notification.priority.value
        model.is_read = notification.is_read
        model.read_at = to_storage(notification.read_at)
        model.expires_at = to_storage(notification.expires_at)
        model.metadata_ = notification.metadata or {}
        model.created_at = to_storage(notification.created_at) or storage_now()

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            recipient_kind=RecipientKind(model.recipient_kind),
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            related=RelatedRefs(
                job_id=model.related_job_id,
                application_id=model.related_application_id,
                conversation_id=model.related_conversation_id,
                user_id=model.related_user_id,
                employer_id=model.related_employer_id,
            ),
            action_url=model.action_url,
            priority=NotificationPriority(model.priority),
            is_read=bool(model.is_read),
            read_at=from_storage(model.read_at),
            expires_at=from_storage(model.expires_at),
            metadata=dict(model.metadata_ or {}),
            created_at=from_storage(model.created_at),
        )


__all__ = ["NotificationRepository"]
