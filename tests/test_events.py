"""Event bus and WebSocket fan-out."""

import asyncio
from unittest.mock import AsyncMock

from swiftaid.core.events import EventBus
from swiftaid.core.ws_manager import ConnectionManager


def test_subscribe_and_unsubscribe():
    bus = EventBus()
    seen = []
    unsubscribe = bus.subscribe(lambda event, payload: seen.append((event, payload)))

    bus.publish("request.created", {"request_id": 1})
    unsubscribe()
    bus.publish("request.assigned", {"request_id": 1})
    unsubscribe()  # second call is a no-op

    assert seen == [("request.created", {"request_id": 1})]


def test_failing_handler_does_not_block_others():
    bus = EventBus()
    seen = []

    def broken(event, payload):
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(lambda event, payload: seen.append(event))

    bus.publish("chat.message", {})
    assert seen == ["chat.message"]


def test_dispatch_without_connections_is_noop():
    manager = ConnectionManager()
    manager.dispatch("request.created", {"request_id": 1, "requester_id": 2, "driver_id": None})
    assert manager.total_connections == 0


def test_send_to_profiles_reaches_only_targets():
    manager = ConnectionManager()
    requester, driver, admin, bystander = AsyncMock(), AsyncMock(), AsyncMock(), AsyncMock()

    async def scenario():
        await manager.connect(requester, 1, "user")
        await manager.connect(driver, 2, "driver")
        await manager.connect(admin, 3, "admin")
        await manager.connect(bystander, 4, "user")
        await manager.send_to_profiles([1, 2, 3], "request.assigned", {"request_id": 9})

    asyncio.run(scenario())

    for ws in (requester, driver, admin):
        ws.send_text.assert_awaited_once()
        assert '"request.assigned"' in ws.send_text.await_args.args[0]
    bystander.send_text.assert_not_awaited()
    assert manager.profiles_with_role("admin") == [3]


def test_disconnect_forgets_profile():
    manager = ConnectionManager()
    ws = AsyncMock()
    asyncio.run(manager.connect(ws, 5, "driver"))
    assert manager.total_connections == 1
    manager.disconnect(ws, 5)
    assert manager.total_connections == 0
    assert manager.profiles_with_role("driver") == []


def test_dispatch_after_loop_closed_is_noop():
    manager = ConnectionManager()
    ws = AsyncMock()
    asyncio.run(manager.connect(ws, 1, "user"))
    # asyncio.run closed the loop the socket was accepted on
    manager.dispatch("request.created", {"request_id": 1, "requester_id": 1})
    ws.send_text.assert_not_awaited()
