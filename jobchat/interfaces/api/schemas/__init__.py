from .common import ApiModel, Envelope, PaginationRead
from .conversation import (
    ConversationData,
    ConversationDetailData,
    ConversationListData,
    ConversationRead,
    JobSummaryRead,
    LastMessageRead,
    ParticipantRead,
    SideCountsRead,
    SideFlagsRead,
    StartConversationRequest,
    UnreadSummaryRead,
)
from .message import (
    AttachmentSchema,
    MessageData,
    MessageListData,
    MessageRead,
    SendMessageRequest,
)
from .notification import (
    DeletedCountRead,
    ModifiedCountRead,
    NotificationListData,
    NotificationRead,
    UnreadNotificationsRead,
)

__all__ = [
    "ApiModel",
    "AttachmentSchema",
    "ConversationData",
    "ConversationDetailData",
    "ConversationListData",
    "ConversationRead",
    "DeletedCountRead",
    "Envelope",
    "JobSummaryRead",
    "LastMessageRead",
    "MessageData",
    "MessageListData",
    "MessageRead",
    "ModifiedCountRead",
    "NotificationListData",
    "NotificationRead",
    "PaginationRead",
    "ParticipantRead",
    "SendMessageRequest",
    "SideCountsRead",
    "SideFlagsRead",
    "StartConversationRequest",
    "UnreadNotificationsRead",
    "UnreadSummaryRead",
]
