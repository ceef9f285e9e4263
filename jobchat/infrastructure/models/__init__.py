"""ORM models used by the application infrastructure."""

from .directory import ApplicantModel, EmployerModel, JobApplicationModel, JobModel
from .conversation import ConversationModel
from .message import MessageModel
from .notification import NotificationModel

__all__ = [
    "ApplicantModel",
    "ConversationModel",
    "EmployerModel",
    "JobApplicationModel",
    "JobModel",
    "MessageModel",
    "NotificationModel",
]
