"""Request store - the durable collection of emergency requests.

Every write commits immediately (write-through) unless it runs inside an
``atomic()`` block, in which case the outermost block commits. Status and
driver binding are only ever written through ``conditional_update``, which
issues a single ``UPDATE ... WHERE status = :expected`` so concurrent
callers cannot both win the same transition.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from swiftaid.core.errors import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from swiftaid.core.lifecycle import ACTIVE_STATUSES, RequestStatus
from swiftaid.models.chat_message import ChatMessage
from swiftaid.models.emergency_request import EmergencyRequest

logger = logging.getLogger(__name__)

# Written by the dispatch engine only, never through update()
ENGINE_OWNED_FIELDS = frozenset({"id", "requester_id", "status", "driver_id", "created_at"})


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Report database failures during ``action`` as PersistenceError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store %s failed", action)
        raise PersistenceError("Database is unavailable, please retry") from exc


class RequestStore:
    """Repository over the ``emergency_requests`` and ``chat_messages`` tables."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[Session]:
        """Group writes into one transaction; only the outermost block commits."""
        outermost = self._depth == 0
        self._depth += 1
        try:
            yield self.db
            if outermost:
                self.db.commit()
        except SQLAlchemyError as exc:
            if outermost:
                self.db.rollback()
            logger.exception("Request store write failed")
            raise PersistenceError("Request store is unavailable, please retry") from exc
        except Exception:
            if outermost:
                self.db.rollback()
            raise
        finally:
            self._depth -= 1

    # ---------- reads ----------

    def get(self, request_id: int) -> EmergencyRequest | None:
        """Return the request, or None when it does not exist."""
        with store_errors(f"read of request {request_id}"):
            return self.db.get(EmergencyRequest, request_id)

    def get_or_raise(self, request_id: int) -> EmergencyRequest:
        request = self.get(request_id)
        if request is None:
            raise NotFoundError("Request not found")
        return request

    def _list(self, *criteria) -> list[EmergencyRequest]:
        stmt = (
            select(EmergencyRequest)
            .where(*criteria)
            .order_by(EmergencyRequest.created_at.desc(), EmergencyRequest.id.desc())
        )
        with store_errors("list"):
            return list(self.db.execute(stmt).scalars().all())

    def list_all(self, status: RequestStatus | str | None = None) -> list[EmergencyRequest]:
        """All requests, newest first, optionally filtered by status."""
        if status is None:
            return self._list()
        return self._list(EmergencyRequest.status == RequestStatus(status).value)

    def list_by_requester(self, requester_id: int) -> list[EmergencyRequest]:
        return self._list(EmergencyRequest.requester_id == requester_id)

    def list_by_driver(self, driver_id: int) -> list[EmergencyRequest]:
        return self._list(EmergencyRequest.driver_id == driver_id)

    def driver_has_active_job(self, driver_id: int) -> bool:
        """True while the driver is bound to an assigned or in-progress request."""
        stmt = (
            select(EmergencyRequest.id)
            .where(EmergencyRequest.driver_id == driver_id)
            .where(EmergencyRequest.status.in_([s.value for s in ACTIVE_STATUSES]))
            .limit(1)
        )
        with store_errors(f"active job lookup for driver {driver_id}"):
            return self.db.execute(stmt).first() is not None

    # ---------- writes ----------

    def create(self, requester_id: int, payload: dict[str, Any]) -> EmergencyRequest:
        """Store a new pending request with an empty chat history."""
        request = EmergencyRequest(
            requester_id=requester_id,
            patient_name=payload["patient_name"],
            patient_age=payload["patient_age"],
            location=payload["location"],
            emergency_type=payload["emergency_type"],
            additional_info=payload.get("additional_info") or "",
            status=RequestStatus.pending.value,
        )
        with self.atomic():
            self.db.add(request)
            self.db.flush()
        return request

    def update(self, request_id: int, **fields: Any) -> EmergencyRequest:
        """Merge non-lifecycle fields into an existing request."""
        owned = ENGINE_OWNED_FIELDS.intersection(fields)
        if owned:
            raise ValidationError(f"Fields {sorted(owned)} can only be changed by the dispatch engine")
        unknown = set(fields).difference(EmergencyRequest.__table__.columns.keys())
        if unknown:
            raise ValidationError(f"Unknown request fields: {sorted(unknown)}")
        request = self.get_or_raise(request_id)
        with self.atomic():
            for key, value in fields.items():
                setattr(request, key, value)
        return request

    def conditional_update(
        self,
        request_id: int,
        expected_status: RequestStatus,
        values: dict[str, Any],
        owner_criteria: dict[str, int] | None = None,
    ) -> EmergencyRequest:
        """Apply ``values`` only if the request is still in ``expected_status``.

        ``owner_criteria`` (e.g. ``{"driver_id": 7}``) is folded into the same
        WHERE clause. When no row matches, the request is re-read to report
        why: NotFoundError, InvalidTransitionError or ForbiddenError.
        """
        owner_criteria = owner_criteria or {}
        stmt = (
            update(EmergencyRequest)
            .where(EmergencyRequest.id == request_id)
            .where(EmergencyRequest.status == expected_status.value)
        )
        for column, value in owner_criteria.items():
            stmt = stmt.where(getattr(EmergencyRequest, column) == value)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        with self.atomic():
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                self._raise_rejection(request_id, expected_status, owner_criteria)
        request = self.db.get(EmergencyRequest, request_id, populate_existing=True)
        return request

    def _raise_rejection(
        self,
        request_id: int,
        expected_status: RequestStatus,
        owner_criteria: dict[str, int],
    ) -> None:
        current = self.db.get(EmergencyRequest, request_id, populate_existing=True)
        if current is None:
            raise NotFoundError("Request not found")
        if current.status != expected_status.value:
            raise InvalidTransitionError(
                f"Request {request_id} is {current.status}, expected {expected_status.value}"
            )
        for column, value in owner_criteria.items():
            if getattr(current, column) != value:
                raise ForbiddenError("You are not allowed to act on this request")
        raise InvalidTransitionError(f"Request {request_id} changed concurrently, please reload")

    def append_chat_message(self, request_id: int, sender_id: int, text: str) -> ChatMessage:
        """Append one message to the request's chat history."""
        self.get_or_raise(request_id)
        message = ChatMessage(request_id=request_id, sender_id=sender_id, text=text)
        with self.atomic():
            self.db.add(message)
            self.db.flush()
        return message
