"""Bearer token issue and verification."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from memberships.api.auth_utils import (
    create_access_token,
    decode_access_token,
    token_allows_site,
)

SECRET = "test-secret"


def test_round_trip_claims() -> None:
    token = create_access_token({"sub": "user-1", "site_id": 1}, SECRET)

    claims = decode_access_token(token, SECRET)

    assert claims is not None
    assert claims["sub"] == "user-1"
    assert token_allows_site(claims, 1)
    assert not token_allows_site(claims, 2)


def test_wrong_secret_rejected() -> None:
    token = create_access_token({"sub": "user-1", "site_id": 1}, SECRET)
    assert decode_access_token(token, "other") is None


def test_missing_secret_rejects_everything() -> None:
    token = create_access_token({"sub": "user-1", "site_id": 1}, SECRET)
    assert decode_access_token(token, None) is None
    assert decode_access_token(token, "") is None


def test_expired_token_rejected() -> None:
    issued = datetime.now(UTC) - timedelta(days=2)
    token = create_access_token(
        {"sub": "user-1", "site_id": 1}, SECRET, expires_delta=timedelta(days=1), now_utc=issued
    )
    assert decode_access_token(token, SECRET) is None


def test_garbage_token_rejected() -> None:
    assert decode_access_token("user-token", SECRET) is None


def test_subject_required() -> None:
    assert not token_allows_site({"site_id": 1}, 1)
