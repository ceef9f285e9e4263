"""Tests for access token helpers."""

from __future__ import annotations

from datetime import timedelta

import pytest
from conftest import APPLICANT, EMPLOYER

from jobchat.infrastructure.security import (
    create_access_token,
    decode_access_token,
    participant_from_claims,
)


@pytest.mark.parametrize("ref", [EMPLOYER, APPLICANT])
def test_token_identifies_the_participant(ref) -> None:
    payload = decode_access_token(create_access_token(ref))

    assert payload["sub"] == str(ref.id)
    assert participant_from_claims(payload) == ref


def test_expired_token_is_rejected() -> None:
    token = create_access_token(EMPLOYER, expires_delta=timedelta(seconds=-5))

    with pytest.raises(ValueError):
        decode_access_token(token)


@pytest.mark.parametrize(
    "claims",
    [
        {"sub": "1"},
        {"kind": "employer"},
        {"sub": "1", "kind": "admin"},
        {"sub": "abc", "kind": "applicant"},
    ],
)
def test_incomplete_claims_are_rejected(claims) -> None:
    with pytest.raises(ValueError):
        participant_from_claims(claims)
