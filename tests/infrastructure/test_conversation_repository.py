"""Tests for the conversation store."""

from __future__ import annotations

from conftest import APPLICANT, APPLICATION_ID, EMPLOYER, SECOND_APPLICATION_ID

from jobchat.domain.entities import ConversationStatus, Side
from jobchat.infrastructure.models import ConversationModel
from jobchat.infrastructure.repositories import ConversationRepository, MessageRepository


def _create(
    repo: ConversationRepository,
    application_id: int = APPLICATION_ID,
    applicant_id: int = APPLICANT.id,
):
    return repo.find_or_create(
        application_id=application_id,
        job_id=100,
        employer_id=EMPLOYER.id,
        applicant_id=applicant_id,
        initiated_by=Side.EMPLOYER,
    )


def test_find_or_create_returns_existing_conversation(session) -> None:
    repo = ConversationRepository(session)

    first, created = _create(repo)
    second, created_again = _create(repo)

    assert created is True
    assert created_again is False
    assert second.id == first.id
    assert first.status is ConversationStatus.ACTIVE
    assert first.initiated_by is Side.EMPLOYER
    assert first.unread_count.employer == 0
    assert first.unread_count.applicant == 0


def test_find_or_create_recovers_from_unique_constraint_race(session, monkeypatch) -> None:
    """A creator that missed the winner's row falls back to it after the insert fails."""

    repo = ConversationRepository(session)
    winner, _ = _create(repo)

    real_lookup = repo.get_by_application
    calls: list[int] = []

    def stale_lookup(application_id: int):
        calls.append(application_id)
        if len(calls) == 1:
            return None
        return real_lookup(application_id)

    monkeypatch.setattr(repo, "get_by_application", stale_lookup)

    loser, created = _create(repo)

    assert created is False
    assert loser.id == winner.id
    assert len(calls) == 2
    assert session.query(ConversationModel).count() == 1


def test_unread_counters_never_drop_below_zero(session) -> None:
    repo = ConversationRepository(session)
    conversation, _ = _create(repo)

    repo.increment_unread(conversation.id, Side.APPLICANT)
    repo.increment_unread(conversation.id, Side.APPLICANT)
    repo.decrement_unread(conversation.id, Side.APPLICANT)
    repo.decrement_unread(conversation.id, Side.EMPLOYER)
    session.commit()

    reloaded = repo.get(conversation.id)
    assert reloaded.unread_count.applicant == 1
    assert reloaded.unread_count.employer == 0

    repo.reset_unread(conversation.id, Side.APPLICANT)
    session.commit()
    assert repo.get(conversation.id).unread_count.applicant == 0


def test_archive_requires_both_sides(session) -> None:
    repo = ConversationRepository(session)
    conversation, _ = _create(repo)

    repo.mark_archived(conversation.id, Side.EMPLOYER)
    session.commit()
    half = repo.get(conversation.id)
    assert half.archived_by.employer is True
    assert half.archived_by.applicant is False
    assert half.status is ConversationStatus.ACTIVE

    repo.mark_archived(conversation.id, Side.APPLICANT)
    session.commit()
    assert repo.get(conversation.id).status is ConversationStatus.ARCHIVED


def test_archive_leaves_closed_conversation_closed(session) -> None:
    repo = ConversationRepository(session)
    conversation, _ = _create(repo)
    repo.set_status(conversation.id, ConversationStatus.CLOSED)
    repo.mark_archived(conversation.id, Side.EMPLOYER)
    repo.mark_archived(conversation.id, Side.APPLICANT)
    session.commit()

    assert repo.get(conversation.id).status is ConversationStatus.CLOSED


def test_listing_hides_conversations_archived_by_the_caller(session) -> None:
    repo = ConversationRepository(session)
    kept, _ = _create(repo)
    hidden, _ = _create(repo, SECOND_APPLICATION_ID, applicant_id=2)

    repo.mark_archived(hidden.id, Side.EMPLOYER)
    session.commit()

    employer_page = repo.list_for_participant(EMPLOYER.id, Side.EMPLOYER)
    assert [c.id for c in employer_page.items] == [kept.id]
    assert employer_page.total == 1

    other_applicant_page = repo.list_for_participant(2, Side.APPLICANT)
    assert [c.id for c in other_applicant_page.items] == [hidden.id]


def test_update_last_message_truncates_preview(session) -> None:
    repo = ConversationRepository(session)
    messages = MessageRepository(session)
    conversation, _ = _create(repo)

    message = messages.append(conversation, sender=EMPLOYER, content="x" * 150)
    repo.update_last_message(conversation.id, message)
    session.commit()

    preview = repo.get(conversation.id).last_message
    assert preview.content == "x" * 100
    assert preview.sender == EMPLOYER


def test_unread_summary_counts_active_conversations(session) -> None:
    repo = ConversationRepository(session)
    first, _ = _create(repo)
    second, _ = _create(repo, SECOND_APPLICATION_ID, applicant_id=2)

    repo.increment_unread(first.id, Side.EMPLOYER)
    repo.increment_unread(first.id, Side.EMPLOYER)
    repo.increment_unread(second.id, Side.EMPLOYER)
    session.commit()
    assert repo.unread_summary(EMPLOYER.id, Side.EMPLOYER) == (3, 2)

    repo.set_status(second.id, ConversationStatus.CLOSED)
    session.commit()
    assert repo.unread_summary(EMPLOYER.id, Side.EMPLOYER) == (2, 1)
    assert repo.unread_summary(APPLICANT.id, Side.APPLICANT) == (0, 0)


def test_update_last_message_skips_inactive_conversation(session) -> None:
    repo = ConversationRepository(session)
    messages = MessageRepository(session)
    conversation, _ = _create(repo)
    message = messages.append(conversation, sender=EMPLOYER, content="racing the close")

    repo.set_status(conversation.id, ConversationStatus.CLOSED)

    assert repo.update_last_message(conversation.id, message) is False
    session.rollback()
    assert repo.get(conversation.id).last_message is None
