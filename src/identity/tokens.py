"""Signed bearer tokens.

Tokens are HS256 JWTs keyed with ``AUTH_TOKEN_SECRET``. The ``sub`` claim
carries the user id, alongside ``email``, ``role`` and an ``exp`` set
``AUTH_TOKEN_TTL_HOURS`` after issue.
"""

import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

ALGORITHM = "HS256"
DEFAULT_TTL_HOURS = 24

_DEV_SECRET = "stockroom-dev-secret-change-in-production"


@dataclass(frozen=True)
class Actor:
    """The authenticated user a request acts on behalf of."""

    user_id: str
    email: str
    role: str = "employee"


def _secret() -> str:
    return os.environ.get("AUTH_TOKEN_SECRET", _DEV_SECRET)


def _ttl() -> timedelta:
    return timedelta(hours=float(os.environ.get("AUTH_TOKEN_TTL_HOURS", DEFAULT_TTL_HOURS)))


def issue_token(user_id: str, email: str, role: str = "employee", now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + _ttl(),
    }
    return jwt.encode(claims, _secret(), algorithm=ALGORITHM)


def verify_token(token: str) -> Actor | None:
    """Return the token's actor, or None if it is malformed, forged or expired."""
    if not token:
        return None
    try:
        claims = jwt.decode(token, _secret(), algorithms=[ALGORITHM], options={"require": ["exp", "sub"]})
    except jwt.InvalidTokenError:
        return None

    return Actor(user_id=claims["sub"], email=claims.get("email", ""), role=claims.get("role", "employee"))
