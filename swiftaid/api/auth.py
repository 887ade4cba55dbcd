"""Auth endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from swiftaid.core.deps import get_current_profile
from swiftaid.core.security import issue_token
from swiftaid.db.session import get_db
from swiftaid.models.profile import Profile
from swiftaid.schemas.auth import LoginRequest, ProfileMe, RegisterRequest, TokenResponse
from swiftaid.services.auth_service import authenticate, create_user, get_profile_by_email

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ProfileMe)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Register a new user. Drivers and admins are provisioned separately."""
    if get_profile_by_email(db, data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    return create_user(db, data)


@router.post("/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    """Login and return access token."""
    profile = authenticate(db, data.email, data.password)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    token = issue_token(profile.email, profile.role)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=ProfileMe)
def me(current: Profile = Depends(get_current_profile)):
    """Get current authenticated profile."""
    return current
