"""
Bearer tokens for the authoritative status endpoint.

Tokens are HS256 JWTs signed with the deployment secret. The authoritative
side issues them (see the ``issue-token`` CLI command); connected clients
send them as MEMBERSHIPS_USER_TOKEN.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import jwt

ALGORITHM = "HS256"
DEFAULT_EXPIRY = timedelta(days=30)


def create_access_token(
    data: dict[str, Any],
    secret_key: str,
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(UTC)
    expire = current_time + (expires_delta or DEFAULT_EXPIRY)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, secret_key: str | None) -> dict[str, Any] | None:
    """Verified claims, or None if the token is invalid, expired or unsigned."""
    if not secret_key:
        return None
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
        return cast(dict[str, Any], payload)
    except jwt.JWTError:
        return None


def token_allows_site(claims: dict[str, Any], site_id: int) -> bool:
    """Tokens are scoped to one site through the ``site_id`` claim."""
    return claims.get("sub") is not None and claims.get("site_id") == site_id
