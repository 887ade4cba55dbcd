"""WebSocket connection manager for real-time dispatch events."""

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks active WebSocket connections keyed by profile id."""

    def __init__(self) -> None:
        # profile_id -> set of active websocket connections
        self._connections: dict[int, set[WebSocket]] = {}
        self._roles: dict[int, str] = {}
        self._loop: asyncio.AbstractEventLoop | None = None

    async def connect(self, websocket: WebSocket, profile_id: int, role: str) -> None:
        await websocket.accept()
        self._loop = asyncio.get_running_loop()
        self._connections.setdefault(profile_id, set()).add(websocket)
        self._roles[profile_id] = role
        logger.info("WS connected: profile=%s role=%s (total=%s)", profile_id, role, self.total_connections)

    def disconnect(self, websocket: WebSocket, profile_id: int) -> None:
        conns = self._connections.get(profile_id)
        if conns:
            conns.discard(websocket)
            if not conns:
                del self._connections[profile_id]
                self._roles.pop(profile_id, None)
        logger.info("WS disconnected: profile=%s (total=%s)", profile_id, self.total_connections)

    async def send_to_profile(self, profile_id: int, event: str, data: Any) -> None:
        """Send event to all connections for a profile."""
        conns = self._connections.get(profile_id, set())
        payload = json.dumps({"event": event, "data": data}, default=str)
        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_text(payload)
            except Exception:
                dead.append(ws)
        for ws in dead:
            conns.discard(ws)

    async def send_to_profiles(self, profile_ids: list[int], event: str, data: Any) -> None:
        """Broadcast event to multiple profiles."""
        for pid in profile_ids:
            await self.send_to_profile(pid, event, data)

    def profiles_with_role(self, role: str) -> list[int]:
        return [pid for pid, r in self._roles.items() if r == role]

    def dispatch(self, event: str, payload: dict[str, Any]) -> None:
        """Event bus handler: forward to the requester, the driver and connected admins.

        Called from worker threads, so the send is scheduled on the loop that
        owns the sockets.
        """
        if self._loop is None or self._loop.is_closed() or not self._connections:
            return
        targets = {pid for pid in (payload.get("requester_id"), payload.get("driver_id")) if pid is not None}
        targets.update(self.profiles_with_role("admin"))
        asyncio.run_coroutine_threadsafe(
            self.send_to_profiles(sorted(targets), event, payload),
            self._loop,
        )

    @property
    def total_connections(self) -> int:
        return sum(len(c) for c in self._connections.values())


# Singleton instance used across the app
ws_manager = ConnectionManager()
