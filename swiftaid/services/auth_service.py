"""Auth service."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from swiftaid.core.security import hash_password, verify_password
from swiftaid.models.profile import Profile, User
from swiftaid.schemas.auth import RegisterRequest


def get_profile_by_email(db: Session, email: str) -> Profile | None:
    """Get profile by email, case-insensitively."""
    return db.execute(
        select(Profile).where(func.lower(Profile.email) == email.lower())
    ).scalar_one_or_none()


def create_user(db: Session, data: RegisterRequest) -> User:
    """Create a new `user` profile. Drivers and admins are provisioned, never registered."""
    user = User(
        email=data.email.lower(),
        hashed_password=hash_password(data.password),
        name=data.name,
        phone=data.phone,
        gender=data.gender,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate(db: Session, email: str, password: str) -> Profile | None:
    """Authenticate a profile by email and password."""
    profile = get_profile_by_email(db, email)
    if not profile or not verify_password(password, profile.hashed_password):
        return None
    if not profile.is_active:
        return None
    return profile
