"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String

from jobchat.infrastructure.database import Base
from jobchat.utils import storage_now


class NotificationModel(Base):
    """Database representation for participant notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_created", "recipient_id", "recipient_kind", "created_at"),
        Index("ix_notification_recipient_unread", "recipient_id", "recipient_kind", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, nullable=False)
    recipient_kind = Column(String(20), nullable=False)
    type = Column(String(50), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(String(1000), nullable=False)
    related_job_id = Column(Integer, nullable=True)
    related_application_id = Column(Integer, nullable=True)
    related_conversation_id = Column(Integer, nullable=True)
    related_user_id = Column(Integer, nullable=True)
    related_employer_id = Column(Integer, nullable=True)
    action_url = Column(String(500), nullable=True)
    priority = Column(String(10), nullable=False, default="normal")
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(), nullable=True)
    expires_at = Column(DateTime(), nullable=True, index=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False, default=storage_now)


__all__ = ["NotificationModel"]
