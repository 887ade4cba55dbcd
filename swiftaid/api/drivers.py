"""Drivers API - admin roster views and driver self-service."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from swiftaid.core.deps import http_error, require_admin, require_driver
from swiftaid.core.errors import DispatchError
from swiftaid.db.session import get_db
from swiftaid.models.profile import Admin, Driver
from swiftaid.schemas.driver import (
    AvailabilityUpdate,
    DriverProfileUpdate,
    DriverResponse,
    DriverStats,
    DriverWithStats,
    LocationUpdate,
    ScheduleUpdate,
)
from swiftaid.schemas.emergency_request import EmergencyRequestResponse
from swiftaid.services.identity_service import (
    list_drivers,
    set_availability,
    set_location,
    set_on_schedule,
    update_driver_profile,
)
from swiftaid.services.projection_service import (
    driver_stats,
    list_all_requests,
    list_available_drivers,
    list_by_driver,
)

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("", response_model=list[DriverWithStats])
def list_roster(
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    """All drivers with eligibility and job statistics."""
    requests = list_all_requests(db)
    result = []
    for driver in list_drivers(db):
        stats = driver_stats(requests, driver.id)
        result.append(
            DriverWithStats(
                **DriverResponse.model_validate(driver).model_dump(),
                eligible=driver.is_eligible,
                stats=DriverStats(
                    total_jobs=stats.total_jobs,
                    completed_jobs=stats.completed_jobs,
                    average_rating=round(stats.average_rating, 2),
                ),
            )
        )
    return result


@router.get("/available", response_model=list[DriverResponse])
def list_available(
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    """Drivers an admin can assign right now."""
    return list_available_drivers(db)


@router.get("/me/jobs", response_model=list[EmergencyRequestResponse])
def my_jobs(
    db: Session = Depends(get_db),
    driver: Driver = Depends(require_driver),
):
    """Requests assigned to the current driver, newest first."""
    return list_by_driver(db, driver.id)


@router.put("/me/availability", response_model=DriverResponse)
def update_availability(
    data: AvailabilityUpdate,
    db: Session = Depends(get_db),
    driver: Driver = Depends(require_driver),
):
    try:
        return set_availability(db, driver.id, data.available)
    except DispatchError as e:
        raise http_error(e)


@router.put("/me/schedule", response_model=DriverResponse)
def update_schedule(
    data: ScheduleUpdate,
    db: Session = Depends(get_db),
    driver: Driver = Depends(require_driver),
):
    try:
        return set_on_schedule(db, driver.id, data.on_schedule)
    except DispatchError as e:
        raise http_error(e)


@router.put("/me/location", response_model=DriverResponse)
def update_location(
    data: LocationUpdate,
    db: Session = Depends(get_db),
    driver: Driver = Depends(require_driver),
):
    try:
        return set_location(db, driver.id, data.location)
    except DispatchError as e:
        raise http_error(e)


@router.put("/me", response_model=DriverResponse)
def update_profile(
    data: DriverProfileUpdate,
    db: Session = Depends(get_db),
    driver: Driver = Depends(require_driver),
):
    """Update name, phone, vehicle number or location."""
    try:
        return update_driver_profile(db, driver.id, **data.model_dump())
    except DispatchError as e:
        raise http_error(e)
