"""Wording and priorities of the typed notification helpers."""

from __future__ import annotations

from jobchat.domain.entities import NotificationPriority

STATUS_MESSAGES: dict[str, str] = {
    "reviewed": "Your application for {job_title} at {company} has been reviewed.",
    "shortlisted": "Congratulations! You've been shortlisted for {job_title} at {company}.",
    "rejected": "Your application for {job_title} at {company} was not selected to move forward.",
    "hired": "Congratulations! You've been hired for {job_title} at {company}!",
}
DEFAULT_STATUS_MESSAGE = "Your application status has been updated to {status}."

STATUS_PRIORITIES: dict[str, NotificationPriority] = {
    "reviewed": NotificationPriority.NORMAL,
    "shortlisted": NotificationPriority.HIGH,
    "rejected": NotificationPriority.NORMAL,
    "hired": NotificationPriority.URGENT,
}


def status_title(status: str) -> str:
    return f"Application {status[:1].upper()}{status[1:]}"


def status_message(status: str, *, job_title: str, company: str | None) -> str:
    template = STATUS_MESSAGES.get(status, DEFAULT_STATUS_MESSAGE)
    return template.format(job_title=job_title, company=company or "the company", status=status)


def status_priority(status: str) -> NotificationPriority:
    return STATUS_PRIORITIES.get(status, NotificationPriority.NORMAL)


def applicant_application_url(application_id: int) -> str:
    return f"/user/applications/{application_id}"


def employer_application_url(application_id: int) -> str:
    return f"/employer/applications/{application_id}"


def conversation_url(conversation_id: int) -> str:
    return f"/messages/{conversation_id}"


__all__ = [
    "STATUS_MESSAGES",
    "STATUS_PRIORITIES",
    "applicant_application_url",
    "conversation_url",
    "employer_application_url",
    "status_message",
    "status_priority",
    "status_title",
]
