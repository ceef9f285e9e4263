"""Persistence helpers for conversation entities.

Counter and flag updates are issued as single ``UPDATE`` statements computed by
the database (``unread = unread + 1``) so concurrent senders and readers never
overwrite each other's changes. The methods below flush into the caller's
transaction; committing is left to the use case, except for
:meth:`ConversationRepository.find_or_create` which must commit to let the
unique constraint arbitrate concurrent creators.
"""

from __future__ import annotations

import logging

from sqlalchemy import and_, case, desc, false, func, true
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobchat.domain.entities import (
    ArchivedBy,
    Conversation,
    ConversationStatus,
    LastMessagePreview,
    Message,
    Page,
    ParticipantKind,
    ParticipantRef,
    Side,
    UnreadCount,
    truncate_preview,
)
from jobchat.infrastructure.models import ConversationModel
from jobchat.utils import from_storage, storage_now, to_storage

logger = logging.getLogger(__name__)


class ConversationRepository:
    """Provide storage operations for :class:`Conversation` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, conversation_id: int) -> Conversation | None:
        model = (
            self.session.query(ConversationModel)
            .populate_existing()
            .filter(ConversationModel.id == conversation_id)
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def get_by_application(self, application_id: int) -> Conversation | None:
        model = (
            self.session.query(ConversationModel)
            .populate_existing()
            .filter(ConversationModel.application_id == application_id)
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def find_or_create(
        self,
        *,
        application_id: int,
        job_id: int,
        employer_id: int,
        applicant_id: int,
        initiated_by: Side,
    ) -> tuple[Conversation, bool]:
        """Return the conversation for ``application_id`` and whether it was created.

        The loser of a concurrent creation race hits the unique constraint,
        rolls back and returns the winner's row.
        """

        existing = self.get_by_application(application_id)
        if existing is not None:
            return existing, False

        now = storage_now()
        model = ConversationModel(
            application_id=application_id,
            job_id=job_id,
            employer_id=employer_id,
            applicant_id=applicant_id,
            initiated_by=initiated_by.value,
            status=ConversationStatus.ACTIVE.value,
            unread_employer=0,
            unread_applicant=0,
            archived_by_employer=False,
            archived_by_applicant=False,
            last_activity_at=now,
            created_at=now,
        )
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            winner = self.get_by_application(application_id)
            if winner is None:
                raise
            logger.info(
                "Conversation for application %s was created concurrently; reusing %s",
                application_id,
                winner.id,
            )
            return winner, False
        self.session.refresh(model)
        return self._to_entity(model), True

    def update_last_message(self, conversation_id: int, message: Message) -> bool:
        """Store the preview of ``message`` and bump ``last_activity_at``.

        Only an active conversation is updated; ``False`` means it was closed or
        archived in the meantime and the message must not be kept.
        """

        sent_at = to_storage(message.created_at) or storage_now()
        updated = self.session.query(ConversationModel).filter(
            ConversationModel.id == conversation_id,
            ConversationModel.status == ConversationStatus.ACTIVE.value,
        ).update(
            {
                ConversationModel.last_message_content: truncate_preview(message.content),
                ConversationModel.last_message_sender_id: message.sender.id,
                ConversationModel.last_message_sender_kind: message.sender.kind.value,
                ConversationModel.last_message_sent_at: sent_at,
                ConversationModel.last_activity_at: sent_at,
                ConversationModel.updated_at: storage_now(),
            },
            synchronize_session=False,
        )
        return bool(updated)

    def set_preview(self, conversation_id: int, message: Message | None) -> None:
        """Rewrite the cached preview from ``message`` without touching activity."""

        values = {
            ConversationModel.last_message_content: None,
            ConversationModel.last_message_sender_id: None,
            ConversationModel.last_message_sender_kind: None,
            ConversationModel.last_message_sent_at: None,
        }
        if message is not None:
            values = {
                ConversationModel.last_message_content: truncate_preview(message.content),
                ConversationModel.last_message_sender_id: message.sender.id,
                ConversationModel.last_message_sender_kind: message.sender.kind.value,
                ConversationModel.last_message_sent_at: to_storage(message.created_at),
            }
        self.session.query(ConversationModel).filter(
            ConversationModel.id == conversation_id
        ).update(values, synchronize_session=False)

    def increment_unread(self, conversation_id: int, side: Side) -> None:
        column = self._unread_column(side)
        self.session.query(ConversationModel).filter(
            ConversationModel.id == conversation_id
        ).update({column: column + 1}, synchronize_session=False)

    def decrement_unread(self, conversation_id: int, side: Side) -> None:
        column = self._unread_column(side)
        self.session.query(ConversationModel).filter(
            ConversationModel.id == conversation_id
        ).update(
            {column: case((column > 0, column - 1), else_=0)},
            synchronize_session=False,
        )

    def reset_unread(self, conversation_id: int, side: Side) -> None:
        column = self._unread_column(side)
        self.session.query(ConversationModel).filter(
            ConversationModel.id == conversation_id
        ).update({column: 0}, synchronize_session=False)

    def mark_archived(self, conversation_id: int, side: Side) -> None:
        """Flag ``side`` as archived; both flags set moves an active conversation to archived."""

        own_flag = self._archived_column(side)
        other_flag = self._archived_column(side.other)
        self.session.query(ConversationModel).filter(
            ConversationModel.id == conversation_id
        ).update(
            {
                own_flag: true(),
                ConversationModel.status: case(
                    (
                        and_(
                            other_flag == true(),
                            ConversationModel.status == ConversationStatus.ACTIVE.value,
                        ),
                        ConversationStatus.ARCHIVED.value,
                    ),
                    else_=ConversationModel.status,
                ),
                ConversationModel.updated_at: storage_now(),
            },
            synchronize_session=False,
        )

    def set_status(self, conversation_id: int, status: ConversationStatus) -> None:
        self.session.query(ConversationModel).filter(
            ConversationModel.id == conversation_id
        ).update(
            {
                ConversationModel.status: status.value,
                ConversationModel.updated_at: storage_now(),
            },
            synchronize_session=False,
        )

    def list_for_participant(
        self,
        identity_id: int,
        side: Side,
        *,
        status: ConversationStatus = ConversationStatus.ACTIVE,
        page: int = 1,
        limit: int = 20,
    ) -> Page[Conversation]:
        query = self._participant_query(identity_id, side).filter(
            ConversationModel.status == status.value
        )
        total = query.count()
        result: Page[Conversation] = Page(page=page, limit=limit, total=total)
        models = (
            query.order_by(
                desc(ConversationModel.last_activity_at), desc(ConversationModel.id)
            )
            .offset(result.offset)
            .limit(limit)
            .all()
        )
        result.items = [self._to_entity(model) for model in models]
        return result

    def unread_summary(self, identity_id: int, side: Side) -> tuple[int, int]:
        """Return ``(total unread, conversations with unread)`` for active conversations."""

        column = self._unread_column(side)
        total, with_unread = (
            self._participant_query(
                identity_id,
                side,
                columns=(
                    func.coalesce(func.sum(column), 0),
                    func.coalesce(func.sum(case((column > 0, 1), else_=0)), 0),
                ),
            )
            .filter(ConversationModel.status == ConversationStatus.ACTIVE.value)
            .one()
        )
        return int(total), int(with_unread)

    def _participant_query(self, identity_id: int, side: Side, *, columns=None):
        query = (
            self.session.query(*columns)
            if columns is not None
            else self.session.query(ConversationModel)
        )
        return query.filter(
            self._participant_column(side) == identity_id,
            self._archived_column(side) == false(),
        )

    @staticmethod
    def _participant_column(side: Side):
        if side is Side.EMPLOYER:
            return ConversationModel.employer_id
        return ConversationModel.applicant_id

    @staticmethod
    def _unread_column(side: Side):
        if side is Side.EMPLOYER:
            return ConversationModel.unread_employer
        return ConversationModel.unread_applicant

    @staticmethod
    def _archived_column(side: Side):
        if side is Side.EMPLOYER:
            return ConversationModel.archived_by_employer
        return ConversationModel.archived_by_applicant

    @staticmethod
    def _to_entity(model: ConversationModel) -> Conversation:
        last_message = None
        if model.last_message_content is not None and model.last_message_sender_kind:
            last_message = LastMessagePreview(
                content=model.last_message_content,
                sender=ParticipantRef(
                    ParticipantKind(model.last_message_sender_kind),
                    model.last_message_sender_id,
                ),
                sent_at=from_storage(model.last_message_sent_at),
            )
        return Conversation(
            id=model.id,
            application_id=model.application_id,
            job_id=model.job_id,
            employer_id=model.employer_id,
            applicant_id=model.applicant_id,
            initiated_by=Side(model.initiated_by),
            status=ConversationStatus(model.status),
            last_message=last_message,
            unread_count=UnreadCount(
                employer=model.unread_employer or 0,
                applicant=model.unread_applicant or 0,
            ),
            archived_by=ArchivedBy(
                employer=bool(model.archived_by_employer),
                applicant=bool(model.archived_by_applicant),
            ),
            last_activity_at=from_storage(model.last_activity_at),
            created_at=from_storage(model.created_at),
            updated_at=from_storage(model.updated_at),
        )


__all__ = ["ConversationRepository"]
