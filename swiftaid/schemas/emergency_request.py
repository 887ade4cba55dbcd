"""Emergency request schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from swiftaid.core.lifecycle import MAX_MESSAGE_LENGTH, MAX_RATING, MIN_RATING


class EmergencyRequestCreate(BaseModel):
    patient_name: str = Field(..., min_length=1, max_length=255)
    patient_age: str = Field(..., min_length=1, max_length=20)
    location: str = Field(..., min_length=1, max_length=255)
    emergency_type: str = Field(..., min_length=1, max_length=100)
    additional_info: str = ""


class AssignDriverRequest(BaseModel):
    driver_id: int


class RateServiceRequest(BaseModel):
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    feedback: str = ""


class ChatMessageCreate(BaseModel):
    text: str = Field(..., max_length=MAX_MESSAGE_LENGTH)


class ChatMessageResponse(BaseModel):
    id: int
    sender_id: int
    text: str
    timestamp: datetime

    model_config = {"from_attributes": True}


class EmergencyRequestResponse(BaseModel):
    id: int
    requester_id: int
    patient_name: str
    patient_age: str
    location: str
    emergency_type: str
    additional_info: str
    status: str
    driver_id: int | None
    created_at: datetime
    assigned_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    rating: int | None = None
    feedback: str | None = None
    chat_history: list[ChatMessageResponse] = []

    model_config = {"from_attributes": True}
