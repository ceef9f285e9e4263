"""SQLAlchemy model for conversation messages."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from jobchat.infrastructure.database import Base
from jobchat.utils import storage_now


class MessageModel(Base):
    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_conversation_created", "conversation_id", "created_at"),
        Index("ix_message_sender", "sender_id", "sender_kind"),
        Index("ix_message_unread", "conversation_id", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(Integer, ForeignKey("conversation.id"), nullable=False)
    sender_id = Column(Integer, nullable=False)
    sender_kind = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="text")
    attachment = Column(JSON, nullable=True)
    system_message_type = Column(String(40), nullable=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)


__all__ = ["MessageModel"]
