"""Emergency request lifecycle rules."""

from __future__ import annotations

import enum


class RequestStatus(str, enum.Enum):
    """Status of an emergency request. Strictly linear, no cancellation."""

    pending = "pending"
    assigned = "assigned"
    in_progress = "in-progress"
    completed = "completed"


class Role(str, enum.Enum):
    user = "user"
    driver = "driver"
    admin = "admin"


# The only legal predecessor of each status
PREVIOUS_STATUS: dict[RequestStatus, RequestStatus] = {
    RequestStatus.assigned: RequestStatus.pending,
    RequestStatus.in_progress: RequestStatus.assigned,
    RequestStatus.completed: RequestStatus.in_progress,
}

# Statuses in which a driver is bound to the request
DRIVER_BOUND_STATUSES = frozenset(
    {RequestStatus.assigned, RequestStatus.in_progress, RequestStatus.completed}
)

# Statuses counted as "active" by dashboards
ACTIVE_STATUSES = frozenset({RequestStatus.assigned, RequestStatus.in_progress})

# Chat is open while a driver is on the job
CHAT_OPEN_STATUSES = ACTIVE_STATUSES

MIN_RATING = 1
MAX_RATING = 5

MAX_MESSAGE_LENGTH = 2000

