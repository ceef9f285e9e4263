"""Create, list and retire notifications for applicants and employers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

from jobchat.config import get_settings
from jobchat.domain.entities import (
    MAX_MESSAGE_LENGTH,
    MAX_TITLE_LENGTH,
    Notification,
    NotificationPriority,
    NotificationType,
    Page,
    RecipientKind,
    RelatedRefs,
)
from jobchat.domain.errors import NotFound, ValidationError
from jobchat.infrastructure.notifications import NotificationPublisher, notification_publisher
from jobchat.infrastructure.repositories import NotificationRepository
from jobchat.utils import utcnow_local

from . import templates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    expired: int
    stale_read: int

    @property
    def total(self) -> int:
        return self.expired + self.stale_read


def _bounded_text(value: str | None, *, field: str, limit: int) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"Notification {field} is required")
    if len(text) > limit:
        raise ValidationError(f"Notification {field} cannot exceed {limit} characters")
    return text


def _coerce(enum_type, value, *, field: str):
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid notification {field}: {value!r}") from exc


class NotificationDispatcher:
    """Notification use cases; persistence only, plus a best-effort live push."""

    def __init__(
        self,
        repository: NotificationRepository,
        *,
        publisher: NotificationPublisher | None = None,
    ) -> None:
        self.repository = repository
        self.publisher = publisher or notification_publisher

    def create(
        self,
        recipient_id: int,
        recipient_kind: RecipientKind | str,
        type: NotificationType | str,
        title: str,
        message: str,
        *,
        related: RelatedRefs | None = None,
        action_url: str | None = None,
        priority: NotificationPriority | str = NotificationPriority.NORMAL,
        expires_at: datetime | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        notification = Notification(
            id=None,
            recipient_id=recipient_id,
            recipient_kind=_coerce(RecipientKind, recipient_kind, field="recipient kind"),
            type=_coerce(NotificationType, type, field="type"),
            title=_bounded_text(title, field="title", limit=MAX_TITLE_LENGTH),
            message=_bounded_text(message, field="message", limit=MAX_MESSAGE_LENGTH),
            related=related or RelatedRefs(),
            action_url=action_url.strip() if action_url else None,
            priority=_coerce(NotificationPriority, priority, field="priority"),
            expires_at=expires_at,
            metadata=metadata or {},
            created_at=utcnow_local(),
        )
        saved = self.repository.create(notification)
        try:
            self.publisher.dispatch(saved)
        except Exception:
            logger.warning(
                "Realtime delivery of notification %s failed", saved.id, exc_info=True
            )
        return saved

    def best_effort(
        self, factory: Callable[..., Notification], **kwargs: Any
    ) -> Notification | None:
        """Run a notification helper, logging and swallowing any failure."""

        try:
            return factory(**kwargs)
        except Exception:
            logger.exception(
                "Failed to record %s notification", getattr(factory, "__name__", "a")
            )
            self.repository.session.rollback()
            return None

    def application_received(
        self,
        *,
        employer_id: int,
        application_id: int,
        job_id: int,
        applicant_name: str,
        job_title: str,
    ) -> Notification:
        return self.create(
            employer_id,
            RecipientKind.EMPLOYER,
            NotificationType.APPLICATION_RECEIVED,
            "New Application Received",
            f"{applicant_name} has applied for the {job_title} position.",
            related=RelatedRefs(application_id=application_id, job_id=job_id),
            action_url=templates.employer_application_url(application_id),
            priority=NotificationPriority.NORMAL,
        )

    def application_status_changed(
        self,
        *,
        applicant_id: int,
        application_id: int,
        job_id: int,
        status: str,
        job_title: str,
        company: str | None,
    ) -> Notification:
        return self.create(
            applicant_id,
            RecipientKind.USER,
            NotificationType.APPLICATION_STATUS_CHANGED,
            templates.status_title(status),
            templates.status_message(status, job_title=job_title, company=company),
            related=RelatedRefs(application_id=application_id, job_id=job_id),
            action_url=templates.applicant_application_url(application_id),
            priority=templates.status_priority(status),
            metadata={"status": status},
        )

    def new_message(
        self,
        *,
        recipient_id: int,
        recipient_kind: RecipientKind,
        conversation_id: int,
        sender_name: str,
    ) -> Notification:
        return self.create(
            recipient_id,
            recipient_kind,
            NotificationType.NEW_MESSAGE,
            "New Message",
            f"You have a new message from {sender_name}.",
            related=RelatedRefs(conversation_id=conversation_id),
            action_url=templates.conversation_url(conversation_id),
            priority=NotificationPriority.NORMAL,
        )

    def interview_scheduled(
        self,
        *,
        applicant_id: int,
        application_id: int,
        job_id: int,
        job_title: str,
        company: str | None,
        interview_date: str,
    ) -> Notification:
        return self.create(
            applicant_id,
            RecipientKind.USER,
            NotificationType.INTERVIEW_SCHEDULED,
            "Interview Scheduled",
            f"Your interview for {job_title} at {company or 'the company'} "
            f"has been scheduled for {interview_date}.",
            related=RelatedRefs(application_id=application_id, job_id=job_id),
            action_url=templates.applicant_application_url(application_id),
            priority=NotificationPriority.HIGH,
            metadata={"interviewDate": interview_date},
        )

    def conversation_started(
        self,
        *,
        applicant_id: int,
        conversation_id: int,
        application_id: int,
        job_id: int,
        company: str | None,
        job_title: str,
    ) -> Notification:
        return self.create(
            applicant_id,
            RecipientKind.USER,
            NotificationType.CONVERSATION_STARTED,
            "New Message from Employer",
            f"{company or 'An employer'} has started a conversation about your "
            f"application for {job_title}.",
            related=RelatedRefs(
                conversation_id=conversation_id,
                application_id=application_id,
                job_id=job_id,
            ),
            action_url=templates.conversation_url(conversation_id),
        )

    def list(
        self,
        recipient_id: int,
        recipient_kind: RecipientKind,
        *,
        page: int = 1,
        limit: int = 20,
        type: NotificationType | str | None = None,
        unread_only: bool = False,
    ) -> Page[Notification]:
        type_filter = _coerce(NotificationType, type, field="type") if type else None
        return self.repository.list_for_recipient(
            recipient_id,
            recipient_kind,
            page=page,
            limit=limit,
            type=type_filter,
            unread_only=unread_only,
        )

    def unread_count(self, recipient_id: int, recipient_kind: RecipientKind) -> int:
        return self.repository.count_unread(recipient_id, recipient_kind)

    def mark_read(
        self, notification_id: int, *, recipient_id: int, recipient_kind: RecipientKind
    ) -> None:
        if not self.repository.mark_as_read(
            notification_id, recipient_id=recipient_id, recipient_kind=recipient_kind
        ):
            raise NotFound("Notification not found")

    def mark_all_read(self, recipient_id: int, recipient_kind: RecipientKind) -> int:
        return self.repository.mark_all_as_read(recipient_id, recipient_kind)

    def delete_one(
        self, notification_id: int, *, recipient_id: int, recipient_kind: RecipientKind
    ) -> None:
        if not self.repository.delete(
            notification_id, recipient_id=recipient_id, recipient_kind=recipient_kind
        ):
            raise NotFound("Notification not found")

    def delete_all(self, recipient_id: int, recipient_kind: RecipientKind) -> int:
        return self.repository.delete_all(recipient_id, recipient_kind)

    def sweep_expired(
        self, *, now: datetime | None = None, retention_days: int | None = None
    ) -> SweepResult:
        """Delete expired notifications and read ones older than the retention window."""

        current = now or utcnow_local()
        days = retention_days or get_settings().notification_retention_days
        result = SweepResult(
            expired=self.repository.delete_expired(current),
            stale_read=self.repository.delete_read_older_than(current - timedelta(days=days)),
        )
        logger.info(
            "Notification sweep removed %s expired and %s read notifications older than %s days",
            result.expired,
            result.stale_read,
            days,
        )
        return result


__all__ = ["NotificationDispatcher", "SweepResult"]
