"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from swiftaid.core.errors import (
    DispatchError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from swiftaid.core.lifecycle import Role
from swiftaid.core.security import token_subject
from swiftaid.db.session import get_db
from swiftaid.models.profile import Admin, Driver, Profile, User
from swiftaid.services.auth_service import get_profile_by_email

security = HTTPBearer(auto_error=False)


def get_current_profile(
    db: Annotated[Session, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Profile:
    """Require authenticated profile. Raises 401 if not authenticated."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    email = token_subject(credentials.credentials)
    if email is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    profile = get_profile_by_email(db, email)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Profile not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not profile.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Profile is inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile


def require_user(current: Annotated[Profile, Depends(get_current_profile)]) -> User:
    """Require a member of the public (can request ambulances)."""
    if current.role != Role.user.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only users can request ambulances",
        )
    return current


def require_driver(current: Annotated[Profile, Depends(get_current_profile)]) -> Driver:
    """Require an ambulance driver."""
    if current.role != Role.driver.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only drivers can do this",
        )
    return current


def require_admin(current: Annotated[Profile, Depends(get_current_profile)]) -> Admin:
    """Require a dispatcher."""
    if current.role != Role.admin.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can do this",
        )
    return current


_STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (ValidationError, 422),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def http_error(exc: DispatchError) -> HTTPException:
    """Translate a service error into the matching HTTP error."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
