"""SQLAlchemy model for conversations."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)

from jobchat.infrastructure.database import Base
from jobchat.utils import storage_now


class ConversationModel(Base):
    """Database representation of a conversation.

    ``application_id`` is unique: concurrent creators for one application
    collapse onto a single row.
    """

    __tablename__ = "conversation"
    __table_args__ = (
        UniqueConstraint("application_id", name="uq_conversation_application"),
        CheckConstraint("unread_employer >= 0", name="ck_conversation_unread_employer"),
        CheckConstraint("unread_applicant >= 0", name="ck_conversation_unread_applicant"),
        Index("ix_conversation_employer_activity", "employer_id", "last_activity_at"),
        Index("ix_conversation_applicant_activity", "applicant_id", "last_activity_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("job_application.id"), nullable=False)
    job_id = Column(Integer, ForeignKey("job.id"), nullable=False)
    employer_id = Column(Integer, ForeignKey("employer.id"), nullable=False)
    applicant_id = Column(Integer, ForeignKey("applicant.id"), nullable=False)

    last_message_content = Column(String(100), nullable=True)
    last_message_sender_id = Column(Integer, nullable=True)
    last_message_sender_kind = Column(String(20), nullable=True)
    last_message_sent_at = Column(DateTime(), nullable=True)

    unread_employer = Column(Integer, nullable=False, default=0)
    unread_applicant = Column(Integer, nullable=False, default=0)

    status = Column(String(20), nullable=False, default="active", index=True)
    archived_by_employer = Column(Boolean, nullable=False, default=False)
    archived_by_applicant = Column(Boolean, nullable=False, default=False)
    initiated_by = Column(String(20), nullable=False)

    last_activity_at = Column(DateTime(), nullable=False, default=storage_now)
    created_at = Column(DateTime(), nullable=False, default=storage_now)
    updated_at = Column(DateTime(), nullable=True, onupdate=storage_now)


__all__ = ["ConversationModel"]
