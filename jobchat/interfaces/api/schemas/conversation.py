"""Pydantic models describing conversation payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .common import ApiModel, PaginationRead
from .message import MessageRead


class StartConversationRequest(ApiModel):
    application_id: int = Field(..., ge=1)
    initial_message: str | None = None


class ParticipantRead(ApiModel):
    id: int
    kind: str
    name: str
    company: str | None = None
    avatar_url: str | None = None


class JobSummaryRead(ApiModel):
    id: int
    title: str
    company: str | None = None


class LastMessageRead(ApiModel):
    content: str
    sender_id: int
    sender_kind: str
    sent_at: datetime | None = None


class SideCountsRead(ApiModel):
    employer: int
    applicant: int


class SideFlagsRead(ApiModel):
    employer: bool
    applicant: bool


class ConversationRead(ApiModel):
    id: int
    application_id: int
    job_id: int
    employer_id: int
    applicant_id: int
    status: str
    initiated_by: str
    last_message: LastMessageRead | None = None
    unread_count: SideCountsRead
    archived_by: SideFlagsRead
    last_activity_at: datetime | None = None
    created_at: datetime | None = None
    my_unread_count: int | None = None
    employer: ParticipantRead | None = None
    applicant: ParticipantRead | None = None
    job: JobSummaryRead | None = None


class ConversationData(ApiModel):
    conversation: ConversationRead


class ConversationListData(ApiModel):
    conversations: list[ConversationRead]
    pagination: PaginationRead


class ConversationDetailData(ApiModel):
    conversation: ConversationRead
    messages: list[MessageRead]
    pagination: PaginationRead


class UnreadSummaryRead(ApiModel):
    unread_count: int
    conversations_with_unread: int


__all__ = [
    "ConversationData",
    "ConversationDetailData",
    "ConversationListData",
    "ConversationRead",
    "JobSummaryRead",
    "LastMessageRead",
    "ParticipantRead",
    "SideCountsRead",
    "SideFlagsRead",
    "StartConversationRequest",
    "UnreadSummaryRead",
]
