"""JWT token issuance and validation utilities.

Tokens are signed with the secret and algorithm from settings.
They carry the standard claims (sub, iss, iat, exp) plus a custom
``scopes`` claim holding the customer's roles.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import jwt
from jwt.exceptions import InvalidTokenError

from customer_api.lib.settings import settings


def issue_token(
    subject: str,
    roles: Sequence[str] = ("ROLE_USER",),
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token.

    Args:
        subject: Login identifier of the customer (stored in 'sub' claim)
        roles: Role names (stored in 'scopes' claim)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Example:
        >>> token = issue_token("alex@gmail.com", ["ROLE_USER"])
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expiration_minutes)

    now = datetime.now(timezone.utc)

    payload = {
        "sub": subject,
        "scopes": list(roles),
        "iss": settings.jwt_issuer,
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(
        payload,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def verify_token(token: str) -> dict:
    """Verify and decode a token.

    Raises:
        InvalidTokenError: If token is invalid, expired, issued by someone else
            or the signature doesn't match
    """
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        issuer=settings.jwt_issuer,
    )


def get_subject(token: str) -> str:
    """Return the subject of a valid token."""
    payload = verify_token(token)
    subject = payload.get("sub")
    if not subject:
        raise InvalidTokenError("token has no subject")
    return subject


def is_token_valid(token: str, username: str) -> bool:
    """True when the token verifies and belongs to ``username``."""
    try:
        return get_subject(token) == username
    except InvalidTokenError:
        return False
