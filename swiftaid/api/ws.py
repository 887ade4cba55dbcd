"""WebSocket endpoint with JWT auth."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from swiftaid.core.security import token_subject
from swiftaid.core.ws_manager import ws_manager
from swiftaid.db.session import get_db
from swiftaid.services.auth_service import get_profile_by_email

logger = logging.getLogger(__name__)

router = APIRouter()


def _authenticate_ws(db: Session, token: str) -> tuple[int, str] | None:
    """Validate JWT and return (profile_id, role), or None."""
    email = token_subject(token)
    if email is None:
        return None
    profile = get_profile_by_email(db, email)
    if not profile or not profile.is_active:
        return None
    return profile.id, profile.role


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, db: Session = Depends(get_db)):
    """
    WebSocket endpoint. Client connects with ?token=<jwt>.
    Server pushes events: request.created, request.assigned, request.started,
    request.completed, request.rated, chat.message, driver.updated
    """
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=4001, reason="Missing token")
        return

    identity = _authenticate_ws(db, token)
    # the socket may stay open for hours; do not hold a pooled connection
    db.close()
    if identity is None:
        logger.info("WS rejected: invalid token")
        await websocket.close(code=4003, reason="Invalid or expired token")
        return

    profile_id, role = identity
    await ws_manager.connect(websocket, profile_id, role)
    try:
        while True:
            # Keep connection alive; client can send pings
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text('{"event":"pong"}')
    except WebSocketDisconnect:
        pass
    finally:
        ws_manager.disconnect(websocket, profile_id)
