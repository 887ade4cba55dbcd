"""Emergency requests API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from swiftaid.core.deps import (
    get_current_profile,
    http_error,
    require_admin,
    require_driver,
    require_user,
)
from swiftaid.core.errors import DispatchError
from swiftaid.core.lifecycle import RequestStatus
from swiftaid.db.session import get_db
from swiftaid.models.profile import Admin, Driver, Profile, User
from swiftaid.schemas.emergency_request import (
    AssignDriverRequest,
    ChatMessageCreate,
    ChatMessageResponse,
    EmergencyRequestCreate,
    EmergencyRequestResponse,
    RateServiceRequest,
)
from swiftaid.services.chat_service import get_chat_history, send_message
from swiftaid.services.dispatch_service import (
    assign_driver,
    complete_job,
    create_request,
    get_request,
    rate_service,
    start_job,
)
from swiftaid.services.projection_service import list_all_requests, list_by_requester

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("", response_model=EmergencyRequestResponse, status_code=status.HTTP_201_CREATED)
def create(
    data: EmergencyRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    """Submit an emergency request. Starts pending."""
    try:
        return create_request(db, current_user, data)
    except DispatchError as e:
        raise http_error(e)


@router.get("", response_model=list[EmergencyRequestResponse])
def list_all(
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    """All requests, newest first. Admins only."""
    return list_all_requests(db, status_filter)


@router.get("/me", response_model=list[EmergencyRequestResponse])
def list_mine(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    """Requests raised by the current user, newest first."""
    return list_by_requester(db, current_user.id)


@router.get("/{request_id}", response_model=EmergencyRequestResponse)
def get_one(
    request_id: int,
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_profile),
):
    """Request with its full chat history. Requester, assigned driver or admin."""
    request = get_request(db, request_id, current)
    if not request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
    return request


@router.post("/{request_id}/assign", response_model=EmergencyRequestResponse)
def assign(
    request_id: int,
    data: AssignDriverRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    """Admin binds a driver to a pending request."""
    try:
        return assign_driver(db, admin, request_id, data.driver_id)
    except DispatchError as e:
        raise http_error(e)


@router.post("/{request_id}/start", response_model=EmergencyRequestResponse)
def start(
    request_id: int,
    db: Session = Depends(get_db),
    driver: Driver = Depends(require_driver),
):
    """Assigned driver starts the job."""
    try:
        return start_job(db, driver, request_id)
    except DispatchError as e:
        raise http_error(e)


@router.post("/{request_id}/complete", response_model=EmergencyRequestResponse)
def complete(
    request_id: int,
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_profile),
):
    """Assigned driver or requester closes out the job."""
    try:
        return complete_job(db, current, request_id)
    except DispatchError as e:
        raise http_error(e)


@router.post("/{request_id}/rate", response_model=EmergencyRequestResponse)
def rate(
    request_id: int,
    data: RateServiceRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    """Requester rates a completed job (1-5) with optional feedback."""
    try:
        return rate_service(db, current_user, request_id, data.rating, data.feedback)
    except DispatchError as e:
        raise http_error(e)


@router.get("/{request_id}/messages", response_model=list[ChatMessageResponse])
def list_messages(
    request_id: int,
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_profile),
):
    """Chat history in the order it was sent."""
    try:
        return get_chat_history(db, request_id, current)
    except DispatchError as e:
        raise http_error(e)


@router.post("/{request_id}/messages", response_model=ChatMessageResponse, status_code=status.HTTP_201_CREATED)
def post_message(
    request_id: int,
    data: ChatMessageCreate,
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_profile),
):
    """Requester or assigned driver sends a chat message."""
    try:
        return send_message(db, current, request_id, data.text)
    except DispatchError as e:
        raise http_error(e)
