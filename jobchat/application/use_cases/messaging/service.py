"""Conversation and message use cases.

Every mutating use case runs the same visible sequence: authorize the caller,
write the message, update the conversation bookkeeping, commit, and only then
emit the counterpart's notification. Notification failures are logged and
never undo the committed message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from jobchat.application.use_cases.notifications import NotificationDispatcher
from jobchat.domain.entities import (
    Attachment,
    Conversation,
    ConversationStatus,
    Identity,
    JobRecord,
    Message,
    MessageType,
    Page,
    ParticipantKind,
    ParticipantRef,
    Side,
    SystemMessageType,
)
from jobchat.domain.errors import Conflict, ConversationClosed, Forbidden, NotFound
from jobchat.infrastructure.repositories import (
    ConversationRepository,
    DirectoryRepository,
    MessageRepository,
    NotificationRepository,
    normalize_content,
)

logger = logging.getLogger(__name__)


@dataclass
class ConversationView:
    """A conversation with the display data of both participants."""

    conversation: Conversation
    my_unread_count: int
    employer: Identity | None = None
    applicant: Identity | None = None
    job: JobRecord | None = None


@dataclass
class ConversationDetail:
    view: ConversationView
    messages: Page[Message]


@dataclass(frozen=True)
class UnreadSummary:
    unread_count: int
    conversations_with_unread: int


class MessagingService:
    """Orchestrates the conversation store, the message store and notifications."""

    def __init__(
        self,
        session: Session,
        *,
        conversations: ConversationRepository,
        messages: MessageRepository,
        directory: DirectoryRepository,
        dispatcher: NotificationDispatcher,
    ) -> None:
        self.session = session
        self.conversations = conversations
        self.messages = messages
        self.directory = directory
        self.dispatcher = dispatcher

    @classmethod
    def from_session(cls, session: Session) -> "MessagingService":
        return cls(
            session,
            conversations=ConversationRepository(session),
            messages=MessageRepository(session),
            directory=DirectoryRepository(session),
            dispatcher=NotificationDispatcher(NotificationRepository(session)),
        )

    def start_conversation(
        self,
        caller: Identity,
        application_id: int,
        initial_message: str | None = None,
    ) -> Conversation:
        if caller.kind is not ParticipantKind.EMPLOYER:
            raise Forbidden("Only employers can initiate conversations")

        application = self.directory.get_application(application_id)
        if application is None:
            raise NotFound("Application not found")
        if not application.is_owned_by(caller.id):
            raise Forbidden("Not authorized to contact this applicant")

        text = normalize_content(initial_message) if initial_message is not None else None

        existing = self.conversations.get_by_application(application_id)
        if existing is not None:
            raise Conflict(
                "A conversation already exists for this application",
                conversation_id=existing.id,
            )

        conversation, created = self.conversations.find_or_create(
            application_id=application_id,
            job_id=application.job.id,
            employer_id=caller.id,
            applicant_id=application.applicant_id,
            initiated_by=Side.EMPLOYER,
        )
        if not created:
            raise Conflict(
                "A conversation already exists for this application",
                conversation_id=conversation.id,
            )
        logger.info(
            "Employer %s started conversation %s for application %s",
            caller.id,
            conversation.id,
            application_id,
        )

        if text:
            self._append(conversation, sender=caller.ref, content=text)

        self.dispatcher.best_effort(
            self.dispatcher.conversation_started,
            applicant_id=application.applicant_id,
            conversation_id=conversation.id,
            application_id=application_id,
            job_id=application.job.id,
            company=caller.company or application.job.company,
            job_title=application.job.title,
        )
        return self._reload(conversation.id)

    def send_message(
        self,
        caller: Identity,
        conversation_id: int,
        content: str,
        type: MessageType = MessageType.TEXT,
        attachment: Attachment | None = None,
    ) -> Message:
        conversation, side = self._authorize(caller, conversation_id)
        message = self._append(
            conversation,
            sender=caller.ref,
            content=content,
            type=type,
            attachment=attachment,
        )

        recipient = conversation.participant(side.other)
        self.dispatcher.best_effort(
            self.dispatcher.new_message,
            recipient_id=recipient.id,
            recipient_kind=recipient.recipient_kind,
            conversation_id=conversation.id,
            sender_name=caller.display_name,
        )
        return message

    def post_system_message(
        self,
        conversation: Conversation,
        content: str,
        system_message_type: SystemMessageType,
        metadata: dict[str, Any] | None = None,
    ) -> Message:
        """Record a platform-authored event in the transcript, on the employer side."""

        return self._append(
            conversation,
            sender=conversation.participant(Side.EMPLOYER),
            content=content,
            type=MessageType.SYSTEM,
            system_message_type=system_message_type,
            metadata=metadata,
        )

    def mark_read(self, caller: Identity, conversation_id: int) -> None:
        conversation, side = self._authorize(caller, conversation_id)
        self._mark_read(conversation, caller.ref, side)

    def archive(self, caller: Identity, conversation_id: int) -> Conversation:
        conversation, side = self._authorize(caller, conversation_id)
        try:
            self.conversations.mark_archived(conversation.id, side)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        archived = self._reload(conversation.id)
        if archived.status is ConversationStatus.ARCHIVED:
            logger.info("Conversation %s archived by both participants", archived.id)
        return archived

    def delete_message(self, caller: Identity, conversation_id: int, message_id: int) -> None:
        conversation, side = self._authorize(caller, conversation_id)
        message = self.messages.get(message_id)
        if message is None or message.conversation_id != conversation.id or message.is_deleted:
            raise NotFound("Message not found")
        if message.sender != caller.ref:
            raise Forbidden("Only the sender can delete a message")
        try:
            if self.messages.soft_delete(message_id):
                self.conversations.decrement_unread(conversation.id, side.other)
            self.conversations.set_preview(conversation.id, self.messages.latest(conversation.id))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def unread_summary(self, caller: Identity) -> UnreadSummary:
        total, with_unread = self.conversations.unread_summary(caller.id, caller.side)
        return UnreadSummary(unread_count=total, conversations_with_unread=with_unread)

    def list_conversations(
        self,
        caller: Identity,
        *,
        status: ConversationStatus = ConversationStatus.ACTIVE,
        page: int = 1,
        limit: int = 20,
    ) -> Page[ConversationView]:
        conversations = self.conversations.list_for_participant(
            caller.id, caller.side, status=status, page=page, limit=limit
        )
        employers = self.directory.get_identities(
            ParticipantKind.EMPLOYER, (c.employer_id for c in conversations.items)
        )
        applicants = self.directory.get_identities(
            ParticipantKind.APPLICANT, (c.applicant_id for c in conversations.items)
        )
        jobs = self.directory.get_jobs(c.job_id for c in conversations.items)
        views = [
            ConversationView(
                conversation=conversation,
                my_unread_count=conversation.unread_count.for_side(caller.side),
                employer=employers.get(conversation.employer_id),
                applicant=applicants.get(conversation.applicant_id),
                job=jobs.get(conversation.job_id),
            )
            for conversation in conversations.items
        ]
        return Page(items=views, page=page, limit=limit, total=conversations.total)

    def get_conversation(
        self,
        caller: Identity,
        conversation_id: int,
        *,
        page: int = 1,
        limit: int = 50,
    ) -> ConversationDetail:
        """Return the conversation with one page of messages and mark it read."""

        conversation, side = self._authorize(caller, conversation_id)
        messages = self.messages.list(conversation.id, page=page, limit=limit)
        self._mark_read(conversation, caller.ref, side)
        return ConversationDetail(view=self._view(self._reload(conversation.id), side), messages=messages)

    def list_messages(
        self,
        caller: Identity,
        conversation_id: int,
        *,
        page: int = 1,
        limit: int = 50,
    ) -> Page[Message]:
        conversation, _ = self._authorize(caller, conversation_id)
        return self.messages.list(conversation.id, page=page, limit=limit)

    def _authorize(self, caller: Identity, conversation_id: int) -> tuple[Conversation, Side]:
        conversation = self.conversations.get(conversation_id)
        if conversation is None:
            raise NotFound("Conversation not found")
        side = conversation.side_of(caller.ref)
        if side is None:
            raise Forbidden("Not authorized to access this conversation")
        return conversation, side

    def _append(
        self,
        conversation: Conversation,
        *,
        sender: ParticipantRef,
        content: str,
        type: MessageType = MessageType.TEXT,
        attachment: Attachment | None = None,
        system_message_type: SystemMessageType | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Message:
        """Append a message and update the conversation in one transaction."""

        try:
            message = self.messages.append(
                conversation,
                sender=sender,
                content=content,
                type=type,
                attachment=attachment,
                system_message_type=system_message_type,
                metadata=metadata,
            )
            if not self.conversations.update_last_message(conversation.id, message):
                raise ConversationClosed(
                    "Cannot send messages to a closed or archived conversation"
                )
            self.conversations.increment_unread(conversation.id, sender.side.other)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return message

    def _mark_read(self, conversation: Conversation, reader: ParticipantRef, side: Side) -> None:
        try:
            self.messages.mark_all_read(conversation.id, reader)
            self.conversations.reset_unread(conversation.id, side)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def _reload(self, conversation_id: int) -> Conversation:
        conversation = self.conversations.get(conversation_id)
        if conversation is None:  # pragma: no cover - rows are never hard-deleted
            raise NotFound("Conversation not found")
        return conversation

    def _view(self, conversation: Conversation, side: Side) -> ConversationView:
        return ConversationView(
            conversation=conversation,
            my_unread_count=conversation.unread_count.for_side(side),
            employer=self.directory.get_identity(conversation.participant(Side.EMPLOYER)),
            applicant=self.directory.get_identity(conversation.participant(Side.APPLICANT)),
            job=self.directory.get_jobs([conversation.job_id]).get(conversation.job_id),
        )


__all__ = [
    "ConversationDetail",
    "ConversationView",
    "MessagingService",
    "UnreadSummary",
]
