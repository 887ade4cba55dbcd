"""Chat service - requester and driver messages on an active request."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from swiftaid.core.errors import ForbiddenError, InvalidTransitionError, ValidationError
from swiftaid.core.events import CHAT_MESSAGE, event_bus
from swiftaid.core.lifecycle import CHAT_OPEN_STATUSES, MAX_MESSAGE_LENGTH, RequestStatus, Role
from swiftaid.models.chat_message import ChatMessage
from swiftaid.models.profile import Profile
from swiftaid.services.request_store import RequestStore

logger = logging.getLogger(__name__)


def send_message(db: Session, sender: Profile | None, request_id: int, text: str | None) -> ChatMessage:
    """Append a message to the request's chat history.

    Blank text, a missing sender or a missing request are rejected before
    anything is written.
    """
    text = (text or "").strip()
    if not text:
        raise ValidationError("Message text is required")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise ValidationError(f"Message is longer than {MAX_MESSAGE_LENGTH} characters")
    if sender is None:
        raise ValidationError("An authenticated sender is required")

    store = RequestStore(db)
    request = store.get_or_raise(request_id)
    if sender.id not in (request.requester_id, request.driver_id):
        raise ForbiddenError("Only the requester and the assigned driver can chat on this request")
    if RequestStatus(request.status) not in CHAT_OPEN_STATUSES:
        raise InvalidTransitionError(f"Chat is closed while the request is {request.status}")

    message = store.append_chat_message(request.id, sender.id, text)
    logger.debug("Message %s appended to request %s by %s", message.id, request.id, sender.id)
    event_bus.publish(
        CHAT_MESSAGE,
        {
            "request_id": request.id,
            "requester_id": request.requester_id,
            "driver_id": request.driver_id,
            "message_id": message.id,
            "sender_id": message.sender_id,
            "text": message.text,
            "timestamp": message.timestamp,
        },
    )
    return message


def get_chat_history(db: Session, request_id: int, viewer: Profile) -> list[ChatMessage]:
    """Full history in insertion order. Participants and admins only."""
    request = RequestStore(db).get_or_raise(request_id)
    if viewer.role != Role.admin.value and viewer.id not in (request.requester_id, request.driver_id):
        raise ForbiddenError("You cannot read this conversation")
    return list(request.chat_history)
