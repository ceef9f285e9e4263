"""Endpoints for conversations and their messages."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from jobchat.application.use_cases.messaging import ConversationView, MessagingService
from jobchat.domain.entities import (
    Attachment,
    Conversation,
    ConversationStatus,
    Identity,
    Message,
    MessageType,
)
from jobchat.interfaces.api.dependencies import get_current_identity, get_messaging_service
from jobchat.interfaces.api.schemas import (
    AttachmentSchema,
    ConversationData,
    ConversationDetailData,
    ConversationListData,
    ConversationRead,
    Envelope,
    JobSummaryRead,
    LastMessageRead,
    MessageData,
    MessageListData,
    MessageRead,
    PaginationRead,
    ParticipantRead,
    SendMessageRequest,
    SideCountsRead,
    SideFlagsRead,
    StartConversationRequest,
    UnreadSummaryRead,
)

router = APIRouter(tags=["conversations"])


def _participant_to_schema(identity) -> ParticipantRead | None:
    if identity is None:
        return None
    return ParticipantRead(
        id=identity.id,
        kind=identity.kind.value,
        name=identity.name,
        company=identity.company,
        avatar_url=identity.avatar_url,
    )


def _conversation_to_schema(
    conversation: Conversation, view: ConversationView | None = None
) -> ConversationRead:
    preview = conversation.last_message
    schema = ConversationRead(
        id=conversation.id,
        application_id=conversation.application_id,
        job_id=conversation.job_id,
        employer_id=conversation.employer_id,
        applicant_id=conversation.applicant_id,
        status=conversation.status.value,
        initiated_by=conversation.initiated_by.value,
        last_message=LastMessageRead(
            content=preview.content,
            sender_id=preview.sender.id,
            sender_kind=preview.sender.kind.value,
            sent_at=preview.sent_at,
        )
        if preview
        else None,
        unread_count=SideCountsRead(
            employer=conversation.unread_count.employer,
            applicant=conversation.unread_count.applicant,
        ),
        archived_by=SideFlagsRead(
            employer=conversation.archived_by.employer,
            applicant=conversation.archived_by.applicant,
        ),
        last_activity_at=conversation.last_activity_at,
        created_at=conversation.created_at,
    )
    if view is not None:
        schema.my_unread_count = view.my_unread_count
        schema.employer = _participant_to_schema(view.employer)
        schema.applicant = _participant_to_schema(view.applicant)
        if view.job is not None:
            schema.job = JobSummaryRead(
                id=view.job.id, title=view.job.title, company=view.job.company
            )
    return schema


def _message_to_schema(message: Message) -> MessageRead:
    attachment = message.attachment
    return MessageRead(
        id=message.id or 0,
        conversation_id=message.conversation_id,
        sender_id=message.sender.id,
        sender_kind=message.sender.kind.value,
        content=message.content,
        type=message.type.value,
        attachment=AttachmentSchema(
            filename=attachment.filename,
            original_name=attachment.original_name,
            mimetype=attachment.mimetype,
            size=attachment.size,
            url=attachment.url,
        )
        if attachment
        else None,
        system_message_type=message.system_message_type.value
        if message.system_message_type
        else None,
        metadata=message.metadata or {},
        is_read=message.is_read,
        read_at=message.read_at,
        created_at=message.created_at,
    )


@router.get("/conversations", response_model=Envelope[ConversationListData])
def list_conversations(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status_filter: ConversationStatus = Query(default=ConversationStatus.ACTIVE, alias="status"),
    caller: Identity = Depends(get_current_identity),
    service: MessagingService = Depends(get_messaging_service),
) -> Envelope[ConversationListData]:
    """Return the caller's conversations, most recently active first."""

    views = service.list_conversations(caller, status=status_filter, page=page, limit=limit)
    return Envelope(
        data=ConversationListData(
            conversations=[_conversation_to_schema(v.conversation, v) for v in views.items],
            pagination=PaginationRead.from_page(views),
        )
    )


@router.post(
    "/conversations",
    response_model=Envelope[ConversationData],
    status_code=status.HTTP_201_CREATED,
)
def start_conversation(
    payload: StartConversationRequest,
    caller: Identity = Depends(get_current_identity),
    service: MessagingService = Depends(get_messaging_service),
) -> Envelope[ConversationData]:
    conversation = service.start_conversation(
        caller, payload.application_id, payload.initial_message
    )
    return Envelope(
        data=ConversationData(conversation=_conversation_to_schema(conversation)),
        message="Conversation started",
    )


@router.get("/conversations/{conversation_id}", response_model=Envelope[ConversationDetailData])
def get_conversation(
    conversation_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    caller: Identity = Depends(get_current_identity),
    service: MessagingService = Depends(get_messaging_service),
) -> Envelope[ConversationDetailData]:
    """Return the conversation with a page of messages; marks it read for the caller."""

    detail = service.get_conversation(caller, conversation_id, page=page, limit=limit)
    return Envelope(
        data=ConversationDetailData(
            conversation=_conversation_to_schema(detail.view.conversation, detail.view),
            messages=[_message_to_schema(m) for m in detail.messages.items],
            pagination=PaginationRead.from_page(detail.messages),
        )
    )


@router.get("/conversations/{conversation_id}/messages", response_model=Envelope[MessageListData])
def list_messages(
    conversation_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    caller: Identity = Depends(get_current_identity),
    service: MessagingService = Depends(get_messaging_service),
) -> Envelope[MessageListData]:
    messages = service.list_messages(caller, conversation_id, page=page, limit=limit)
    return Envelope(
        data=MessageListData(
            messages=[_message_to_schema(m) for m in messages.items],
            pagination=PaginationRead.from_page(messages),
        )
    )


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=Envelope[MessageData],
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    conversation_id: int,
    payload: SendMessageRequest,
    caller: Identity = Depends(get_current_identity),
    service: MessagingService = Depends(get_messaging_service),
) -> Envelope[MessageData]:
    attachment = None
    if payload.attachment is not None:
        attachment = Attachment(**payload.attachment.model_dump())
    message = service.send_message(
        caller,
        conversation_id,
        payload.content,
        type=MessageType(payload.type),
        attachment=attachment,
    )
    return Envelope(data=MessageData(message=_message_to_schema(message)), message="Message sent")


@router.put("/conversations/{conversation_id}/read", response_model=Envelope[None])
def mark_conversation_read(
    conversation_id: int,
    caller: Identity = Depends(get_current_identity),
    service: MessagingService = Depends(get_messaging_service),
) -> Envelope[None]:
    service.mark_read(caller, conversation_id)
    return Envelope(message="Messages marked as read")


@router.put("/conversations/{conversation_id}/archive", response_model=Envelope[ConversationData])
def archive_conversation(
    conversation_id: int,
    caller: Identity = Depends(get_current_identity),
    service: MessagingService = Depends(get_messaging_service),
) -> Envelope[ConversationData]:
    conversation = service.archive(caller, conversation_id)
    return Envelope(
        data=ConversationData(conversation=_conversation_to_schema(conversation)),
        message="Conversation archived",
    )


@router.delete(
    "/conversations/{conversation_id}/messages/{message_id}",
    response_model=Envelope[None],
)
def delete_message(
    conversation_id: int,
    message_id: int,
    caller: Identity = Depends(get_current_identity),
    service: MessagingService = Depends(get_messaging_service),
) -> Envelope[None]:
    service.delete_message(caller, conversation_id, message_id)
    return Envelope(message="Message deleted")


@router.get("/unread-count", response_model=Envelope[UnreadSummaryRead])
def unread_count(
    caller: Identity = Depends(get_current_identity),
    service: MessagingService = Depends(get_messaging_service),
) -> Envelope[UnreadSummaryRead]:
    summary = service.unread_summary(caller)
    return Envelope(
        data=UnreadSummaryRead(
            unread_count=summary.unread_count,
            conversations_with_unread=summary.conversations_with_unread,
        )
    )
