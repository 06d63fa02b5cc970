"""
Tests for the notification relay: room routing and loop-less behaviour.
"""
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from rapidwaste.services.notification_service import (
    ADMIN_ROOM,
    BROADCAST_ROOM,
    EVENT_DRIVER_BOOKING,
    EVENT_DRIVER_STATUS,
    EVENT_NEW_BOOKING,
    NotificationRelay,
    driver_room,
)


def _socket():
    websocket = Mock()
    websocket.accept = AsyncMock()
    websocket.send_json = AsyncMock()
    return websocket


class TestRooms:

    def test_connect_joins_room_and_broadcast(self):
        relay = NotificationRelay()
        websocket = _socket()

        asyncio.run(relay.connect(websocket, ADMIN_ROOM))

        websocket.accept.assert_awaited_once()
        assert relay.connection_count(ADMIN_ROOM) == 1
        assert relay.connection_count(BROADCAST_ROOM) == 1

    def test_disconnect_leaves_every_room(self):
        relay = NotificationRelay()
        websocket = _socket()
        asyncio.run(relay.connect(websocket, driver_room("D0001")))

        relay.disconnect(websocket)

        assert relay.connection_count(driver_room("D0001")) == 0
        assert relay.connection_count(BROADCAST_ROOM) == 0

    def test_send_reaches_room_members_only(self):
        relay = NotificationRelay()
        admin, driver = _socket(), _socket()

        async def scenario():
            await relay.connect(admin, ADMIN_ROOM)
            await relay.connect(driver, driver_room("D0001"))
            await relay._send(ADMIN_ROOM, EVENT_DRIVER_STATUS, {"driver_id": "D0001", "status": "busy"})

        asyncio.run(scenario())

        admin.send_json.assert_awaited_once_with({
            "event": EVENT_DRIVER_STATUS,
            "data": {"driver_id": "D0001", "status": "busy"},
        })
        driver.send_json.assert_not_awaited()

    def test_broken_socket_is_dropped(self):
        relay = NotificationRelay()
        websocket = _socket()
        websocket.send_json.side_effect = RuntimeError("closed")

        async def scenario():
            await relay.connect(websocket)
            await relay._send(BROADCAST_ROOM, EVENT_NEW_BOOKING, {})

        asyncio.run(scenario())
        assert relay.connection_count(BROADCAST_ROOM) == 0


class TestNotify:

    def test_without_loop_is_a_no_op(self, pending_booking):
        relay = NotificationRelay()

        relay.notify_new_booking(pending_booking)
        relay.notify_status_change(pending_booking)
        relay.notify_driver_status_change("D0001", "busy")

    def test_status_change_targets_driver_room(self, scheduled_booking):
        relay = NotificationRelay()
        relay._dispatch = Mock()

        relay.notify_status_change(scheduled_booking)

        rooms = [c.args[0] for c in relay._dispatch.call_args_list]
        events = [c.args[1] for c in relay._dispatch.call_args_list]
        assert rooms == [BROADCAST_ROOM, driver_room("D0001")]
        assert events[1] == EVENT_DRIVER_BOOKING

    def test_unassigned_booking_skips_driver_room(self, pending_booking):
        relay = NotificationRelay()
        relay._dispatch = Mock()

        relay.notify_status_change(pending_booking)

        assert [c.args[0] for c in relay._dispatch.call_args_list] == [BROADCAST_ROOM]

    def test_dispatch_errors_are_swallowed(self, pending_booking):
        relay = NotificationRelay()
        relay._dispatch = Mock(side_effect=RuntimeError("boom"))

        relay.notify_new_booking(pending_booking)
        relay.notify_driver_status_change("D0001", "offline")


class TestNotificationSocket:
    """WS /ws/notifications"""

    def test_client_joins_requested_room(self, client):
        from rapidwaste.services.notification_service import notification_relay

        with client.websocket_connect("/ws/notifications?room=admin"):
            assert notification_relay.connection_count(ADMIN_ROOM) >= 1
