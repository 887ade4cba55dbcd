"""Read-only views and dashboard metrics over requests and drivers.

Nothing here writes. Aggregates are recomputed from the current snapshot
on every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from swiftaid.core.lifecycle import ACTIVE_STATUSES, RequestStatus
from swiftaid.models.emergency_request import EmergencyRequest
from swiftaid.models.profile import Driver
from swiftaid.services.identity_service import list_drivers
from swiftaid.services.request_store import RequestStore, store_errors


@dataclass
class RequestPartitions:
    """Requests split by workflow stage."""

    pending: list[EmergencyRequest] = field(default_factory=list)
    active: list[EmergencyRequest] = field(default_factory=list)  # assigned | in-progress
    completed: list[EmergencyRequest] = field(default_factory=list)


@dataclass
class DriverStats:
    total_jobs: int
    completed_jobs: int
    average_rating: float


def list_all_requests(db: Session, status: RequestStatus | str | None = None) -> list[EmergencyRequest]:
    return RequestStore(db).list_all(status)


def list_by_requester(db: Session, requester_id: int) -> list[EmergencyRequest]:
    return RequestStore(db).list_by_requester(requester_id)


def list_by_driver(db: Session, driver_id: int) -> list[EmergencyRequest]:
    return RequestStore(db).list_by_driver(driver_id)


def list_available_drivers(db: Session) -> list[Driver]:
    """Drivers with available=true and on_schedule=false, by name."""
    stmt = (
        select(Driver)
        .where(Driver.available.is_(True))
        .where(or_(Driver.on_schedule.is_(False), Driver.on_schedule.is_(None)))
        .order_by(Driver.name, Driver.id)
    )
    with store_errors("available driver lookup"):
        return list(db.execute(stmt).scalars().all())


def partition_requests(requests: Iterable[EmergencyRequest]) -> RequestPartitions:
    parts = RequestPartitions()
    for req in requests:
        status = RequestStatus(req.status)
        if status == RequestStatus.pending:
            parts.pending.append(req)
        elif status in ACTIVE_STATUSES:
            parts.active.append(req)
        else:
            parts.completed.append(req)
    return parts


def rated_requests(requests: Iterable[EmergencyRequest]) -> list[EmergencyRequest]:
    return [
        r for r in requests if r.status == RequestStatus.completed.value and r.rating is not None
    ]


def average_rating(requests: Iterable[EmergencyRequest]) -> float:
    """Mean rating over rated completed requests; 0.0 when nothing is rated."""
    rated = rated_requests(requests)
    if not rated:
        return 0.0
    return sum(r.rating for r in rated) / len(rated)


def completion_rate(requests: Iterable[EmergencyRequest]) -> float:
    """Share of requests that are completed; 0.0 when there are none."""
    requests = list(requests)
    if not requests:
        return 0.0
    done = sum(1 for r in requests if r.status == RequestStatus.completed.value)
    return done / len(requests)


def driver_utilization(drivers: Iterable[Driver], requests: Iterable[EmergencyRequest]) -> float:
    """Share of drivers currently bound to an assigned or in-progress request."""
    driver_ids = {d.id for d in drivers}
    if not driver_ids:
        return 0.0
    busy = {
        r.driver_id
        for r in requests
        if r.driver_id in driver_ids and RequestStatus(r.status) in ACTIVE_STATUSES
    }
    return len(busy) / len(driver_ids)


def driver_stats(requests: Iterable[EmergencyRequest], driver_id: int) -> DriverStats:
    mine = [r for r in requests if r.driver_id == driver_id]
    completed = [r for r in mine if r.status == RequestStatus.completed.value]
    return DriverStats(
        total_jobs=len(mine),
        completed_jobs=len(completed),
        average_rating=average_rating(completed),
    )


def dashboard_stats(db: Session) -> dict:
    """Admin dashboard figures, computed from the current snapshot."""
    requests = list_all_requests(db)
    drivers = list_drivers(db)
    parts = partition_requests(requests)
    return {
        "total_drivers": len(drivers),
        "available_drivers": sum(1 for d in drivers if d.is_eligible),
        "pending_requests": len(parts.pending),
        "active_requests": len(parts.active),
        "completed_requests": len(parts.completed),
        "total_requests": len(requests),
        "average_rating": round(average_rating(requests), 2),
        "rating_count": len(rated_requests(requests)),
        "completion_rate": round(completion_rate(requests), 4),
        "driver_utilization": round(driver_utilization(drivers, requests), 4),
    }
