"""Hooks called by the application-status workflow of the platform.

The workflow owns applications and their status; these hooks only translate
its transitions into notifications and conversation system messages.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from jobchat.application.use_cases.messaging import MessagingService
from jobchat.domain.entities import (
    APPLICATION_STATUS_HIRED,
    APPLICATION_STATUS_SHORTLISTED,
    ApplicationRecord,
    Conversation,
    Notification,
    Side,
    SystemMessageType,
)
from jobchat.domain.errors import NotFound

logger = logging.getLogger(__name__)

_CONVERSATION_OPENING_STATUSES = {APPLICATION_STATUS_SHORTLISTED, APPLICATION_STATUS_HIRED}


def format_interview_date(
    when: date | datetime,
    *,
    time: str | None = None,
) -> str:
    """Render ``when`` like ``Monday, March 2, 2026`` with an optional time."""

    rendered = f"{when:%A}, {when:%B} {when.day}, {when.year}"
    if time:
        rendered = f"{rendered} at {time}"
    return rendered


class ApplicationEvents:
    """Turn application lifecycle events into notifications and system messages."""

    def __init__(self, messaging: MessagingService) -> None:
        self.messaging = messaging
        self.dispatcher = messaging.dispatcher
        self.directory = messaging.directory

    def application_received(self, application_id: int) -> Notification | None:
        application = self._application(application_id)
        return self.dispatcher.best_effort(
            self.dispatcher.application_received,
            employer_id=application.employer_id,
            application_id=application.id,
            job_id=application.job.id,
            applicant_name=application.applicant_name,
            job_title=application.job.title,
        )

    def status_changed(
        self,
        application_id: int,
        *,
        status: str,
        previous_status: str | None = None,
    ) -> Conversation | None:
        """Notify the applicant; open the conversation on shortlisting or hiring."""

        application = self._application(application_id)
        self.dispatcher.best_effort(
            self.dispatcher.application_status_changed,
            applicant_id=application.applicant_id,
            application_id=application.id,
            job_id=application.job.id,
            status=status,
            job_title=application.job.title,
            company=application.job.company,
        )

        if status not in _CONVERSATION_OPENING_STATUSES or status == previous_status:
            return None

        conversation, created = self._find_or_create(application)
        if created:
            if status == APPLICATION_STATUS_SHORTLISTED:
                content = (
                    "Congratulations! Your application has been shortlisted for "
                    f"{application.job.title}."
                )
            else:
                content = f"Congratulations! You have been hired for {application.job.title}!"
            self.messaging.post_system_message(
                conversation,
                content,
                SystemMessageType.STATUS_CHANGE,
                {"status": status, "previousStatus": previous_status},
            )
        return self.messaging.conversations.get(conversation.id)

    def interview_scheduled(
        self,
        application_id: int,
        *,
        when: date | datetime,
        time: str | None = None,
        location: str | None = None,
        interview_type: str | None = None,
    ) -> Conversation:
        application = self._application(application_id)
        interview_date = format_interview_date(when, time=time)
        self.dispatcher.best_effort(
            self.dispatcher.interview_scheduled,
            applicant_id=application.applicant_id,
            application_id=application.id,
            job_id=application.job.id,
            job_title=application.job.title,
            company=application.job.company,
            interview_date=interview_date,
        )

        conversation, _ = self._find_or_create(application)
        if not conversation.is_active:
            logger.warning(
                "Conversation %s is %s; interview note not posted",
                conversation.id,
                conversation.status.value,
            )
            return conversation

        content = f"An interview has been scheduled for {interview_date}"
        if location:
            content += f" at {location}"
        if interview_type:
            content += f" ({interview_type})"
        self.messaging.post_system_message(
            conversation,
            f"{content}.",
            SystemMessageType.INTERVIEW_SCHEDULED,
            {
                "date": when.isoformat(),
                "time": time,
                "location": location,
                "type": interview_type,
            },
        )
        return self.messaging.conversations.get(conversation.id) or conversation

    def _application(self, application_id: int) -> ApplicationRecord:
        application = self.directory.get_application(application_id)
        if application is None:
            raise NotFound("Application not found")
        return application

    def _find_or_create(self, application: ApplicationRecord) -> tuple[Conversation, bool]:
        return self.messaging.conversations.find_or_create(
            application_id=application.id,
            job_id=application.job.id,
            employer_id=application.employer_id,
            applicant_id=application.applicant_id,
            initiated_by=Side.EMPLOYER,
        )


__all__ = ["ApplicationEvents", "format_interview_date"]
