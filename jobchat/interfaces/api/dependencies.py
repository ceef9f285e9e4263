"""FastAPI dependency utilities."""

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from jobchat.application.use_cases.messaging import MessagingService
from jobchat.application.use_cases.notifications import NotificationDispatcher
from jobchat.domain.entities import Identity
from jobchat.domain.errors import Forbidden, Unauthenticated
from jobchat.infrastructure.database import get_db
from jobchat.infrastructure.repositories import DirectoryRepository, NotificationRepository
from jobchat.infrastructure.security import decode_access_token, participant_from_claims

bearer_scheme = HTTPBearer(auto_error=False)


def resolve_identity(token: str | None, db: Session) -> Identity:
    """Resolve the participant identified by ``token``."""

    if not token:
        raise Unauthenticated("Not authenticated")
    try:
        ref = participant_from_claims(decode_access_token(token))
    except ValueError as exc:
        raise Unauthenticated("Invalid credentials") from exc

    identity = DirectoryRepository(db).get_identity(ref)
    if identity is None:
        raise Unauthenticated("Account not found")
    if not identity.is_verified:
        raise Forbidden("Account must be verified before using messaging")
    return identity


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    token: str | None = Query(default=None, include_in_schema=False),
    db: Session = Depends(get_db),
) -> Identity:
    """Return the caller from the bearer header, falling back to ``?token=``."""

    return resolve_identity(credentials.credentials if credentials else token, db)


def get_messaging_service(db: Session = Depends(get_db)) -> MessagingService:
    return MessagingService.from_session(db)


def get_notification_dispatcher(db: Session = Depends(get_db)) -> NotificationDispatcher:
    return NotificationDispatcher(NotificationRepository(db))
