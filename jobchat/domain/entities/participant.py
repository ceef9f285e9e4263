"""Participant identities and the references that point at them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Side(str, Enum):
    """The two fixed roles of every conversation."""

    EMPLOYER = "employer"
    APPLICANT = "applicant"

    @property
    def other(self) -> "Side":
        return Side.APPLICANT if self is Side.EMPLOYER else Side.EMPLOYER

    @property
    def participant_kind(self) -> "ParticipantKind":
        if self is Side.EMPLOYER:
            return ParticipantKind.EMPLOYER
        return ParticipantKind.APPLICANT


class ParticipantKind(str, Enum):
    """Kind tag of a message sender reference."""

    APPLICANT = "Applicant"
    EMPLOYER = "Employer"

    @property
    def side(self) -> Side:
        if self is ParticipantKind.EMPLOYER:
            return Side.EMPLOYER
        return Side.APPLICANT

    @property
    def recipient_kind(self) -> "RecipientKind":
        if self is ParticipantKind.EMPLOYER:
            return RecipientKind.EMPLOYER
        return RecipientKind.USER


class RecipientKind(str, Enum):
    """Kind tag of a notification recipient reference."""

    USER = "User"
    EMPLOYER = "Employer"

    @property
    def participant_kind(self) -> ParticipantKind:
        if self is RecipientKind.EMPLOYER:
            return ParticipantKind.EMPLOYER
        return ParticipantKind.APPLICANT


@dataclass(frozen=True)
class ParticipantRef:
    """Tagged reference ``{kind, id}`` to an applicant or an employer."""

    kind: ParticipantKind
    id: int

    @property
    def side(self) -> Side:
        return self.kind.side

    @property
    def recipient_kind(self) -> RecipientKind:
        return self.kind.recipient_kind


@dataclass(frozen=True)
class Identity:
    """Resolved participant with the denormalized display fields we expose."""

    ref: ParticipantRef
    name: str
    email: str | None = None
    company: str | None = None
    avatar_url: str | None = None
    is_verified: bool = True

    @property
    def id(self) -> int:
        return self.ref.id

    @property
    def kind(self) -> ParticipantKind:
        return self.ref.kind

    @property
    def side(self) -> Side:
        return self.ref.side

    @property
    def display_name(self) -> str:
        """Company for employers, personal name for applicants."""

        if self.kind is ParticipantKind.EMPLOYER and self.company:
            return self.company
        return self.name


__all__ = ["Identity", "ParticipantKind", "ParticipantRef", "RecipientKind", "Side"]
