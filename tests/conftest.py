"""Shared fixtures: an in-memory database seeded with a small directory."""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from sqlalchemy import false

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from jobchat.application.use_cases.messaging import MessagingService
from jobchat.application.use_cases.notifications import NotificationDispatcher
from jobchat.domain.entities import ParticipantKind, ParticipantRef
from jobchat.infrastructure import database
from jobchat.infrastructure.models import (
    ApplicantModel,
    EmployerModel,
    JobApplicationModel,
    JobModel,
    MessageModel,
)
from jobchat.infrastructure.repositories import DirectoryRepository, NotificationRepository
from jobchat.infrastructure.security import create_access_token

EMPLOYER = ParticipantRef(ParticipantKind.EMPLOYER, 1)
OTHER_EMPLOYER = ParticipantRef(ParticipantKind.EMPLOYER, 2)
APPLICANT = ParticipantRef(ParticipantKind.APPLICANT, 1)
OTHER_APPLICANT = ParticipantRef(ParticipantKind.APPLICANT, 2)
UNVERIFIED_APPLICANT = ParticipantRef(ParticipantKind.APPLICANT, 3)

APPLICATION_ID = 10
SECOND_APPLICATION_ID = 11


def _seed(session) -> None:
    session.add_all(
        [
            EmployerModel(id=1, name="Erin Boss", company="Acme Corp", email="erin@acme.test"),
            EmployerModel(id=2, name="Olga Other", company="Globex", email="olga@globex.test"),
            ApplicantModel(id=1, name="Ana Applicant", email="ana@example.test"),
            ApplicantModel(id=2, name="Bruno Seeker", email="bruno@example.test"),
            ApplicantModel(id=3, name="Una Verified", is_verified=False),
        ]
    )
    session.flush()
    session.add_all(
        [
            JobModel(id=100, employer_id=1, title="Backend Engineer", company="Acme Corp"),
            JobModel(id=200, employer_id=2, title="Data Analyst", company="Globex"),
        ]
    )
    session.flush()
    session.add_all(
        [
            JobApplicationModel(id=APPLICATION_ID, job_id=100, applicant_id=1, status="pending"),
            JobApplicationModel(
                id=SECOND_APPLICATION_ID, job_id=100, applicant_id=2, status="pending"
            ),
            JobApplicationModel(id=12, job_id=200, applicant_id=1, status="pending"),
        ]
    )
    session.commit()


@pytest.fixture(autouse=True)
def setup_database():
    """Recreate and seed every table for each test."""

    from jobchat.infrastructure import models  # noqa: F401

    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    session = database.SessionLocal()
    try:
        _seed(session)
    finally:
        session.close()
    yield
    database.Base.metadata.drop_all(bind=database.engine)


@pytest.fixture()
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def service(session) -> MessagingService:
    return MessagingService.from_session(session)


@pytest.fixture()
def dispatcher(session) -> NotificationDispatcher:
    return NotificationDispatcher(NotificationRepository(session))


@pytest.fixture()
def identities(session):
    """Resolved identities keyed by a short role name."""

    directory = DirectoryRepository(session)
    return {
        "employer": directory.get_identity(EMPLOYER),
        "other_employer": directory.get_identity(OTHER_EMPLOYER),
        "applicant": directory.get_identity(APPLICANT),
        "other_applicant": directory.get_identity(OTHER_APPLICANT),
    }


@pytest.fixture()
def client():
    """Return a test client bound to a fresh application instance."""

    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(ref: ParticipantRef) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(ref)}"}


def count_unread_from(session, conversation_id: int, sender_kind: ParticipantKind) -> int:
    """Unread, non-deleted messages that ``sender_kind`` wrote in the conversation."""

    return (
        session.query(MessageModel)
        .filter(
            MessageModel.conversation_id == conversation_id,
            MessageModel.sender_kind == sender_kind.value,
            MessageModel.is_read == false(),
            MessageModel.is_deleted == false(),
        )
        .count()
    )
