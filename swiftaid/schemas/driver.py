"""Driver profile and dashboard schemas."""

from pydantic import BaseModel, Field


class AvailabilityUpdate(BaseModel):
    available: bool


class ScheduleUpdate(BaseModel):
    on_schedule: bool


class LocationUpdate(BaseModel):
    location: str = Field(..., min_length=1, max_length=255)


class DriverProfileUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    vehicle_number: str | None = None
    location: str | None = None


class DriverResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    vehicle_number: str | None = None
    location: str | None = None
    available: bool
    on_schedule: bool

    model_config = {"from_attributes": True}


class DriverStats(BaseModel):
    total_jobs: int
    completed_jobs: int
    average_rating: float


class DriverWithStats(DriverResponse):
    eligible: bool
    stats: DriverStats


class DashboardStats(BaseModel):
    total_drivers: int
    available_drivers: int
    pending_requests: int
    active_requests: int
    completed_requests: int
    total_requests: int
    average_rating: float
    rating_count: int
    completion_rate: float
    driver_utilization: float
