"""Tests for the notification housekeeping script."""

from __future__ import annotations

from datetime import timedelta

import pytest

from jobchat.application.use_cases.notifications import NotificationDispatcher
from jobchat.domain.entities import NotificationType, RecipientKind
from jobchat.infrastructure.repositories import NotificationRepository
from jobchat.utils import utcnow_local
from scripts import sweep_notifications


def test_script_removes_expired_notifications(session, capsys) -> None:
    dispatcher = NotificationDispatcher(NotificationRepository(session))
    dispatcher.create(
        1,
        RecipientKind.USER,
        NotificationType.MAINTENANCE_NOTICE,
        "Maintenance",
        "Scheduled downtime tonight",
        expires_at=utcnow_local() - timedelta(days=1),
    )
    dispatcher.create(
        1, RecipientKind.USER, NotificationType.WELCOME, "Welcome", "Glad to have you"
    )

    sweep_notifications.main(["--days", "30"])

    output = capsys.readouterr().out
    assert "Expired: 1" in output
    assert "Total removed: 1" in output
    assert dispatcher.list(1, RecipientKind.USER).total == 1


def test_script_rejects_non_positive_days() -> None:
    with pytest.raises(SystemExit):
        sweep_notifications.parse_args(["--days", "0"])
