"""Credentials: bcrypt password hashes and bearer tokens for profiles.

A token names its profile by email (``sub``) and carries the role it was
issued under (``role``). The role claim is informational; authorization
always re-reads the profile.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from swiftaid.core.config import settings


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    """Profiles provisioned without a password can never log in."""
    if not hashed:
        return False
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def issue_token(email: str, role: str) -> str:
    """Bearer token valid for ``jwt_expire_minutes`` (one dispatch shift by default)."""
    issued = datetime.now(timezone.utc)
    claims = {
        "sub": email,
        "role": role,
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def token_subject(token: str) -> str | None:
    """Email the token was issued to, or None if it is forged, expired or malformed."""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = claims.get("sub")
    return subject if isinstance(subject, str) and subject else None
