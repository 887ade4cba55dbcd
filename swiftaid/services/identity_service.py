"""Identity service - profile lookup and driver availability bookkeeping."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from swiftaid.core.errors import NotFoundError, PersistenceError
from swiftaid.core.events import DRIVER_UPDATED, event_bus
from swiftaid.models.profile import Driver, Profile
from swiftaid.services.request_store import store_errors

logger = logging.getLogger(__name__)

DRIVER_PROFILE_FIELDS = ("name", "phone", "vehicle_number", "location")


def resolve_profile(db: Session, profile_id: int) -> Profile | None:
    """Get any profile by id."""
    with store_errors(f"read of profile {profile_id}"):
        return db.get(Profile, profile_id)


def resolve_driver(db: Session, driver_id: int) -> Driver | None:
    """Get a driver by id. Profiles of other roles resolve to None."""
    profile = resolve_profile(db, driver_id)
    if isinstance(profile, Driver):
        return profile
    return None


def list_drivers(db: Session) -> list[Driver]:
    """All drivers, by name."""
    with store_errors("driver roster"):
        result = db.execute(select(Driver).order_by(Driver.name, Driver.id))
        return list(result.scalars().all())


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Profile write failed")
        raise PersistenceError("Profile store is unavailable, please retry") from exc


def update_driver(db: Session, driver_id: int, **fields) -> Driver:
    """Apply driver-controlled fields and publish ``driver.updated``."""
    driver = resolve_driver(db, driver_id)
    if driver is None:
        raise NotFoundError("Driver not found")
    for key, value in fields.items():
        setattr(driver, key, value)
    _commit(db)
    db.refresh(driver)
    logger.info("Driver %s updated: %s", driver.id, sorted(fields))
    event_bus.publish(
        DRIVER_UPDATED,
        {
            "driver_id": driver.id,
            "available": driver.available,
            "on_schedule": driver.on_schedule,
            "location": driver.location,
        },
    )
    return driver


def set_availability(db: Session, driver_id: int, available: bool) -> Driver:
    return update_driver(db, driver_id, available=available)


def set_on_schedule(db: Session, driver_id: int, on_schedule: bool) -> Driver:
    return update_driver(db, driver_id, on_schedule=on_schedule)


def set_location(db: Session, driver_id: int, location: str) -> Driver:
    return update_driver(db, driver_id, location=location)


def update_driver_profile(db: Session, driver_id: int, **fields) -> Driver:
    """Update descriptive driver fields; unset (None) values are ignored."""
    changes = {k: v for k, v in fields.items() if k in DRIVER_PROFILE_FIELDS and v is not None}
    return update_driver(db, driver_id, **changes)
