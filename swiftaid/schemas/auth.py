"""Auth schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    """Public registration. Always creates a `user` profile."""

    email: EmailStr
    password: str
    name: str
    phone: str | None = None
    gender: str | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ProfileMe(BaseModel):
    id: int
    email: str
    name: str
    role: str
    phone: str | None = None
    gender: str | None = None
    is_active: bool
    created_at: datetime

    # Driver-only; None for other roles
    vehicle_number: str | None = None
    location: str | None = None
    available: bool | None = None
    on_schedule: bool | None = None

    model_config = {"from_attributes": True}
