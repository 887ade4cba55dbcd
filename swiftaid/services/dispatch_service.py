"""Dispatch service - the emergency request lifecycle.

pending -> assigned -> in-progress -> completed, with no cancellation and
no reassignment. Each transition is guarded here and persisted as a single
compare-and-set on the expected prior status, so concurrent callers see at
most one winner.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from swiftaid.core.config import settings
from swiftaid.core.errors import (
    DispatchError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from swiftaid.core.events import (
    REQUEST_ASSIGNED,
    REQUEST_COMPLETED,
    REQUEST_CREATED,
    REQUEST_RATED,
    REQUEST_STARTED,
    event_bus,
)
from swiftaid.core.lifecycle import MAX_RATING, MIN_RATING, PREVIOUS_STATUS, RequestStatus, Role
from swiftaid.models.emergency_request import EmergencyRequest
from swiftaid.models.profile import Profile
from swiftaid.schemas.emergency_request import EmergencyRequestCreate
from swiftaid.services.identity_service import resolve_driver
from swiftaid.services.request_store import RequestStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("patient_name", "patient_age", "location", "emergency_type")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_role(actor: Profile | None, role: Role, message: str) -> None:
    if actor is None or actor.role != role.value:
        raise ForbiddenError(message)


def request_payload(request: EmergencyRequest) -> dict[str, Any]:
    """Event payload describing a request's lifecycle fields."""
    return {
        "request_id": request.id,
        "requester_id": request.requester_id,
        "driver_id": request.driver_id,
        "status": request.status,
    }


def _publish(event: str, request: EmergencyRequest, **extra: Any) -> None:
    payload = request_payload(request)
    payload.update(extra)
    event_bus.publish(event, payload)


def _advance(
    store: RequestStore,
    request_id: int,
    target: RequestStatus,
    values: dict[str, Any],
    owner_criteria: dict[str, int] | None = None,
) -> EmergencyRequest:
    """Move a request one step forward, from the status that precedes ``target``."""
    return store.conditional_update(
        request_id,
        PREVIOUS_STATUS[target],
        {"status": target.value, **values},
        owner_criteria=owner_criteria,
    )


def create_request(
    db: Session,
    requester: Profile,
    data: EmergencyRequestCreate | dict[str, Any],
) -> EmergencyRequest:
    """Create a pending request. Only `user` profiles can raise requests."""
    _require_role(requester, Role.user, "Only users can request an ambulance")
    payload = data.model_dump() if isinstance(data, EmergencyRequestCreate) else dict(data)
    missing = [f for f in REQUIRED_FIELDS if not str(payload.get(f) or "").strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    request = RequestStore(db).create(requester.id, payload)
    logger.info("Request %s created by %s (%s)", request.id, requester.id, request.emergency_type)
    _publish(REQUEST_CREATED, request)
    return request


def assign_driver(db: Session, admin: Profile, request_id: int, driver_id: int) -> EmergencyRequest:
    """Bind a driver to a pending request.

    The admin picks from the available-driver pool; eligibility is not
    re-checked here. With ``auto_schedule_drivers`` the driver is marked
    on schedule in the same transaction.
    """
    _require_role(admin, Role.admin, "Only admins can assign drivers")
    store = RequestStore(db)
    store.get_or_raise(request_id)
    driver = resolve_driver(db, driver_id)
    if driver is None:
        raise NotFoundError("Driver not found")

    try:
        with store.atomic():
            request = _advance(
                store,
                request_id,
                RequestStatus.assigned,
                {"driver_id": driver.id, "assigned_at": _utcnow()},
            )
            if settings.auto_schedule_drivers:
                driver.on_schedule = True
    except DispatchError as exc:
        logger.warning("Assign of driver %s to request %s rejected: %s", driver_id, request_id, exc)
        raise

    logger.info("Request %s assigned to driver %s", request.id, driver.id)
    _publish(REQUEST_ASSIGNED, request)
    return request


def start_job(db: Session, driver: Profile, request_id: int) -> EmergencyRequest:
    """Assigned driver starts the job."""
    _require_role(driver, Role.driver, "Only drivers can start a job")
    store = RequestStore(db)
    try:
        request = _advance(
            store,
            request_id,
            RequestStatus.in_progress,
            {"started_at": _utcnow()},
            owner_criteria={"driver_id": driver.id},
        )
    except DispatchError as exc:
        logger.warning("Start of request %s by driver %s rejected: %s", request_id, driver.id, exc)
        raise

    logger.info("Request %s started by driver %s", request.id, driver.id)
    _publish(REQUEST_STARTED, request)
    return request


def complete_job(db: Session, actor: Profile, request_id: int) -> EmergencyRequest:
    """Close out an in-progress job. The assigned driver or the requester may complete."""
    store = RequestStore(db)
    current = store.get_or_raise(request_id)
    if actor is None or actor.id not in (current.requester_id, current.driver_id):
        raise ForbiddenError("Only the assigned driver or the requester can complete this job")

    try:
        with store.atomic():
            request = _advance(
                store,
                request_id,
                RequestStatus.completed,
                {"completed_at": _utcnow()},
            )
            # driver_id never changes once bound
            driver = resolve_driver(db, request.driver_id)
            # a driver holding another active job stays off the available pool
            if (
                settings.auto_schedule_drivers
                and driver is not None
                and not store.driver_has_active_job(driver.id)
            ):
                driver.on_schedule = False
    except DispatchError as exc:
        logger.warning("Completion of request %s by %s rejected: %s", request_id, actor.id, exc)
        raise

    logger.info("Request %s completed by %s", request.id, actor.id)
    _publish(REQUEST_COMPLETED, request)
    return request


def validate_rating(rating: Any) -> int:
    # bool is an int subclass, but True is not a rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be a whole number")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return rating


def rate_service(
    db: Session,
    requester: Profile,
    request_id: int,
    rating: int,
    feedback: str | None = "",
) -> EmergencyRequest:
    """Record the requester's rating of a completed job. Re-rating overwrites."""
    validate_rating(rating)
    if requester is None:
        raise ForbiddenError("Only the requester can rate this service")
    request = RequestStore(db).conditional_update(
        request_id,
        RequestStatus.completed,
        {"rating": rating, "feedback": (feedback or "").strip(), "rated_at": _utcnow()},
        owner_criteria={"requester_id": requester.id},
    )
    logger.info("Request %s rated %s", request.id, rating)
    _publish(REQUEST_RATED, request, rating=rating)
    return request


def get_request(db: Session, request_id: int, viewer: Profile) -> EmergencyRequest | None:
    """Get a request by id. Visible to its requester, its driver and admins."""
    request = RequestStore(db).get(request_id)
    if request is None:
        return None
    if viewer.role == Role.admin.value or viewer.id in (request.requester_id, request.driver_id):
        return request
    return None
