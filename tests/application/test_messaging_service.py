"""Scenario tests for the conversation orchestrator."""

from __future__ import annotations

import pytest
from conftest import APPLICATION_ID, SECOND_APPLICATION_ID, count_unread_from

from jobchat.domain.entities import (
    ConversationStatus,
    MessageType,
    NotificationType,
    RecipientKind,
    Side,
    SystemMessageType,
)
from jobchat.domain.errors import (
    Conflict,
    ConversationClosed,
    Forbidden,
    NotFound,
    ValidationError,
)
from jobchat.infrastructure.database import SessionLocal
from jobchat.infrastructure.models import ConversationModel, MessageModel
from jobchat.infrastructure.repositories import ConversationRepository


def _unread_messages_from(service, conversation_id, side: Side) -> int:
    return count_unread_from(service.session, conversation_id, side.participant_kind)


def _assert_unread_invariant(service, conversation_id) -> None:
    conversation = service.conversations.get(conversation_id)
    assert conversation.unread_count.employer == _unread_messages_from(
        service, conversation_id, Side.APPLICANT
    )
    assert conversation.unread_count.applicant == _unread_messages_from(
        service, conversation_id, Side.EMPLOYER
    )


@pytest.fixture()
def conversation(service, identities):
    return service.start_conversation(identities["employer"], APPLICATION_ID)


def test_employer_starts_conversation_with_initial_message(service, identities, dispatcher) -> None:
    conversation = service.start_conversation(
        identities["employer"], APPLICATION_ID, "Hi, interested?"
    )

    assert conversation.initiated_by is Side.EMPLOYER
    assert conversation.status is ConversationStatus.ACTIVE
    assert conversation.unread_count.applicant == 1
    assert conversation.unread_count.employer == 0
    assert conversation.last_message.content == "Hi, interested?"
    assert service.messages.list(conversation.id).total == 1

    notifications = dispatcher.list(1, RecipientKind.USER)
    assert [n.type for n in notifications.items] == [NotificationType.CONVERSATION_STARTED]
    assert notifications.items[0].related.conversation_id == conversation.id
    assert "Acme Corp" in notifications.items[0].message


def test_second_start_returns_conflict_with_existing_id(service, identities, session) -> None:
    first = service.start_conversation(identities["employer"], APPLICATION_ID)

    with pytest.raises(Conflict) as excinfo:
        service.start_conversation(identities["employer"], APPLICATION_ID, "again")

    assert excinfo.value.conversation_id == first.id
    assert session.query(ConversationModel).count() == 1
    assert session.query(MessageModel).count() == 0


def test_losing_a_creation_race_reports_conflict(service, identities, session, monkeypatch) -> None:
    winner = service.start_conversation(identities["employer"], APPLICATION_ID)
    real_lookup = service.conversations.get_by_application
    calls: list[int] = []

    def stale_lookup(application_id):
        calls.append(application_id)
        return None if len(calls) <= 2 else real_lookup(application_id)

    monkeypatch.setattr(service.conversations, "get_by_application", stale_lookup)

    with pytest.raises(Conflict) as excinfo:
        service.start_conversation(identities["employer"], APPLICATION_ID, "racing")

    assert excinfo.value.conversation_id == winner.id
    assert session.query(ConversationModel).count() == 1
    assert session.query(MessageModel).count() == 0


def test_only_the_owning_employer_may_start(service, identities) -> None:
    with pytest.raises(Forbidden):
        service.start_conversation(identities["applicant"], APPLICATION_ID)
    with pytest.raises(Forbidden):
        service.start_conversation(identities["other_employer"], APPLICATION_ID)
    with pytest.raises(NotFound):
        service.start_conversation(identities["employer"], 999)


def test_blank_initial_message_is_rejected_before_creation(service, identities, session) -> None:
    with pytest.raises(ValidationError):
        service.start_conversation(identities["employer"], APPLICATION_ID, "   ")

    assert session.query(ConversationModel).count() == 0


def test_unread_counts_follow_sends(service, identities, conversation) -> None:
    for content in ("one", "two", "three"):
        service.send_message(identities["employer"], conversation.id, content)

    reloaded = service.conversations.get(conversation.id)
    assert reloaded.unread_count.applicant == 3
    assert reloaded.unread_count.employer == 0
    _assert_unread_invariant(service, conversation.id)


def test_messages_are_listed_in_send_order(service, identities, conversation) -> None:
    service.send_message(identities["employer"], conversation.id, "A")
    service.send_message(identities["applicant"], conversation.id, "B")
    service.send_message(identities["employer"], conversation.id, "C")

    messages = service.list_messages(identities["applicant"], conversation.id)

    assert [m.content for m in messages.items] == ["A", "B", "C"]
    _assert_unread_invariant(service, conversation.id)


def test_send_notifies_the_counterpart(service, identities, conversation, dispatcher) -> None:
    service.send_message(identities["applicant"], conversation.id, "Thanks for reaching out")

    employer_notifications = dispatcher.list(1, RecipientKind.EMPLOYER)
    assert [n.type for n in employer_notifications.items] == [NotificationType.NEW_MESSAGE]
    assert "Ana Applicant" in employer_notifications.items[0].message


def test_notification_failure_keeps_the_message(service, identities, conversation, monkeypatch) -> None:
    def broken(**kwargs):
        raise RuntimeError("notification store unavailable")

    monkeypatch.setattr(service.dispatcher, "new_message", broken)

    message = service.send_message(identities["employer"], conversation.id, "still delivered")

    assert message.id is not None
    assert service.conversations.get(conversation.id).unread_count.applicant == 1


def test_non_participants_cannot_touch_the_conversation(service, identities, conversation) -> None:
    intruders = (identities["other_applicant"], identities["other_employer"])
    for intruder in intruders:
        with pytest.raises(Forbidden):
            service.send_message(intruder, conversation.id, "hello")
        with pytest.raises(Forbidden):
            service.get_conversation(intruder, conversation.id)
        with pytest.raises(Forbidden):
            service.archive(intruder, conversation.id)
    with pytest.raises(NotFound):
        service.send_message(identities["employer"], 999, "hello")


def test_reading_resets_only_the_callers_counter(service, identities, conversation) -> None:
    service.send_message(identities["employer"], conversation.id, "from employer")
    service.send_message(identities["applicant"], conversation.id, "from applicant")
    before = service.conversations.get(conversation.id)

    detail = service.get_conversation(identities["applicant"], conversation.id)

    after = service.conversations.get(conversation.id)
    assert detail.view.my_unread_count == 0
    assert after.unread_count.applicant == 0
    assert after.unread_count.employer == 1
    assert after.last_activity_at == before.last_activity_at
    assert detail.view.employer.company == "Acme Corp"
    assert detail.view.job.title == "Backend Engineer"
    _assert_unread_invariant(service, conversation.id)


def test_mark_read_is_idempotent(service, identities, conversation) -> None:
    service.send_message(identities["employer"], conversation.id, "ping")

    service.mark_read(identities["applicant"], conversation.id)
    service.mark_read(identities["applicant"], conversation.id)

    assert service.conversations.get(conversation.id).unread_count.applicant == 0
    _assert_unread_invariant(service, conversation.id)


def test_archiving_by_both_sides_closes_the_channel(service, identities, conversation, session) -> None:
    once = service.archive(identities["employer"], conversation.id)
    assert once.status is ConversationStatus.ACTIVE
    assert once.archived_by.employer is True

    twice = service.archive(identities["applicant"], conversation.id)
    assert twice.status is ConversationStatus.ARCHIVED

    with pytest.raises(ConversationClosed):
        service.send_message(identities["employer"], conversation.id, "anyone there?")
    assert session.query(MessageModel).count() == 0


def test_archived_conversations_leave_the_default_listing(service, identities, conversation) -> None:
    second = service.start_conversation(identities["employer"], SECOND_APPLICATION_ID)
    service.archive(identities["employer"], conversation.id)

    listed = service.list_conversations(identities["employer"])

    assert [view.conversation.id for view in listed.items] == [second.id]
    assert listed.items[0].applicant.name == "Bruno Seeker"


def test_listing_orders_by_latest_activity(service, identities, conversation) -> None:
    second = service.start_conversation(identities["employer"], SECOND_APPLICATION_ID)
    service.send_message(identities["employer"], conversation.id, "bump")

    listed = service.list_conversations(identities["employer"])

    assert [view.conversation.id for view in listed.items] == [conversation.id, second.id]


def test_deleting_an_unread_message_releases_the_counter(service, identities, conversation) -> None:
    first = service.send_message(identities["employer"], conversation.id, "first")
    second = service.send_message(identities["employer"], conversation.id, "second")

    with pytest.raises(Forbidden):
        service.delete_message(identities["applicant"], conversation.id, second.id)

    service.delete_message(identities["employer"], conversation.id, second.id)

    reloaded = service.conversations.get(conversation.id)
    assert reloaded.unread_count.applicant == 1
    assert reloaded.last_message.content == "first"
    assert [m.id for m in service.list_messages(identities["applicant"], conversation.id).items] == [first.id]
    _assert_unread_invariant(service, conversation.id)

    with pytest.raises(NotFound):
        service.delete_message(identities["employer"], conversation.id, second.id)


def test_unread_summary_spans_conversations(service, identities, conversation) -> None:
    second = service.start_conversation(identities["employer"], SECOND_APPLICATION_ID)
    service.send_message(identities["applicant"], conversation.id, "one")
    service.send_message(identities["applicant"], conversation.id, "two")
    service.send_message(identities["other_applicant"], second.id, "three")

    summary = service.unread_summary(identities["employer"])

    assert summary.unread_count == 3
    assert summary.conversations_with_unread == 2


def test_system_messages_count_for_the_applicant(service, conversation) -> None:
    message = service.post_system_message(
        conversation,
        "Interview on Monday",
        SystemMessageType.INTERVIEW_SCHEDULED,
        {"location": "HQ"},
    )

    assert message.type is MessageType.SYSTEM
    assert message.sender == conversation.participant(Side.EMPLOYER)
    assert message.metadata == {"location": "HQ"}
    assert service.conversations.get(conversation.id).unread_count.applicant == 1


@pytest.mark.parametrize(
    "close",
    [
        lambda repo, conversation_id: repo.set_status(conversation_id, ConversationStatus.CLOSED),
        lambda repo, conversation_id: (
            repo.mark_archived(conversation_id, Side.EMPLOYER),
            repo.mark_archived(conversation_id, Side.APPLICANT),
        ),
    ],
    ids=["closed", "archived"],
)
def test_send_rejected_when_conversation_closes_after_authorization(
    service, identities, conversation, session, monkeypatch, close
) -> None:
    """A concurrent close between the membership check and the write keeps nothing."""

    real_authorize = service._authorize

    def authorize_then_close(caller, conversation_id):
        result = real_authorize(caller, conversation_id)
        other = SessionLocal()
        try:
            close(ConversationRepository(other), conversation_id)
            other.commit()
        finally:
            other.close()
        return result

    monkeypatch.setattr(service, "_authorize", authorize_then_close)

    with pytest.raises(ConversationClosed):
        service.send_message(identities["applicant"], conversation.id, "too late")

    reloaded = service.conversations.get(conversation.id)
    assert reloaded.status is not ConversationStatus.ACTIVE
    assert reloaded.unread_count.employer == 0
    assert reloaded.last_message is None
    assert session.query(MessageModel).count() == 0
