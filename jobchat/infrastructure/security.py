"""Access token helpers.

Tokens are issued by the platform's identity service; the messaging core only
needs to read them. ``create_access_token`` exists for that service and for
tests.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from jobchat.config import get_settings
from jobchat.domain.entities import ParticipantKind, ParticipantRef

ALGORITHM = "HS256"

_KIND_CLAIMS = {
    "employer": ParticipantKind.EMPLOYER,
    "applicant": ParticipantKind.APPLICANT,
}


def create_access_token(
    ref: ParticipantRef, expires_delta: timedelta | None = None
) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {"sub": str(ref.id), "kind": ref.side.value, "exp": expire}
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def participant_from_claims(payload: dict) -> ParticipantRef:
    """Build the caller reference carried by a decoded token."""

    kind = _KIND_CLAIMS.get(str(payload.get("kind", "")).lower())
    subject = payload.get("sub")
    if kind is None or subject is None:
        raise ValueError("Token does not identify a participant")
    try:
        identity_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise ValueError("Token subject is not a valid identifier") from exc
    return ParticipantRef(kind, identity_id)
