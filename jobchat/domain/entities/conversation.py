"""Domain entity representing a conversation bound to a job application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .participant import ParticipantKind, ParticipantRef, Side

PREVIEW_LENGTH = 100


class ConversationStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    CLOSED = "closed"


@dataclass
class LastMessagePreview:
    """Cached preview of the most recent message."""

    content: str
    sender: ParticipantRef
    sent_at: datetime | None


@dataclass
class UnreadCount:
    employer: int = 0
    applicant: int = 0

    def for_side(self, side: Side) -> int:
        return self.employer if side is Side.EMPLOYER else self.applicant


@dataclass
class ArchivedBy:
    employer: bool = False
    applicant: bool = False

    def for_side(self, side: Side) -> bool:
        return self.employer if side is Side.EMPLOYER else self.applicant


@dataclass
class Conversation:
    """The persistent channel between the two parties of an application."""

    id: int | None
    application_id: int
    job_id: int
    employer_id: int
    applicant_id: int
    initiated_by: Side
    status: ConversationStatus = ConversationStatus.ACTIVE
    last_message: LastMessagePreview | None = None
    unread_count: UnreadCount = field(default_factory=UnreadCount)
    archived_by: ArchivedBy = field(default_factory=ArchivedBy)
    last_activity_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status is ConversationStatus.ACTIVE

    def participant(self, side: Side) -> ParticipantRef:
        if side is Side.EMPLOYER:
            return ParticipantRef(ParticipantKind.EMPLOYER, self.employer_id)
        return ParticipantRef(ParticipantKind.APPLICANT, self.applicant_id)

    def side_of(self, ref: ParticipantRef) -> Side | None:
        """Return the side ``ref`` occupies, or ``None`` for outsiders."""

        if ref == self.participant(ref.side):
            return ref.side
        return None


def truncate_preview(content: str) -> str:
    return content[:PREVIEW_LENGTH]


__all__ = [
    "ArchivedBy",
    "Conversation",
    "ConversationStatus",
    "LastMessagePreview",
    "PREVIEW_LENGTH",
    "UnreadCount",
    "truncate_preview",
]
