"""
Notification relay for connected admin and driver clients.

Clients connect over WebSocket and join a room (``admin`` or
``driver-<code>``); every connection also receives global broadcasts.
The ``notify_*`` methods are called from synchronous request handlers, so
they only schedule delivery on the application event loop and return
immediately. Delivery failures are logged and never reach the booking engine.
"""
import asyncio
from collections import defaultdict
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from rapidwaste.core.logging_config import get_logger
from rapidwaste.schemas.booking import BookingResponse

logger = get_logger(__name__)

ADMIN_ROOM = "admin"
BROADCAST_ROOM = "*"

EVENT_NEW_BOOKING = "new-booking"
EVENT_BOOKING_STATUS = "booking-status-update"
EVENT_DRIVER_BOOKING = "driver-booking-update"
EVENT_DRIVER_STATUS = "driver-status-update"


def driver_room(driver_code: str) -> str:
    return f"driver-{driver_code}"


class NotificationRelay:

    def __init__(self):
        self._rooms: Dict[str, Set[WebSocket]] = defaultdict(set)
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    # ---------- connection management ----------
    def attach_loop(self, loop: Optional[asyncio.AbstractEventLoop]) -> None:
        self._loop = loop

    async def connect(self, websocket: WebSocket, room: Optional[str] = None) -> None:
        # Rooms are joined before the handshake completes
        self._rooms[BROADCAST_ROOM].add(websocket)
        if room:
            self._rooms[room].add(websocket)
        try:
            await websocket.accept()
        except Exception:
            self.disconnect(websocket)
            raise
        logger.info(f"[notification_relay] Client joined room={room or BROADCAST_ROOM}")

    def disconnect(self, websocket: WebSocket) -> None:
        for members in self._rooms.values():
            members.discard(websocket)
        logger.info("[notification_relay] Client disconnected")

    def connection_count(self, room: str = BROADCAST_ROOM) -> int:
        return len(self._rooms.get(room, ()))

    # ---------- delivery ----------
    async def _send(self, room: str, event: str, payload: Any) -> None:
        message = {"event": event, "data": payload}
        for websocket in list(self._rooms.get(room, ())):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning(f"[notification_relay] Dropping client in room={room}: {e}")
                self.disconnect(websocket)

    def _dispatch(self, room: str, event: str, payload: Any) -> None:
        if self._loop is None or self._loop.is_closed():
            logger.debug(f"[notification_relay] No event loop attached, skipping {event} for room={room}")
            return
        asyncio.run_coroutine_threadsafe(self._send(room, event, payload), self._loop)

    @staticmethod
    def _booking_payload(booking) -> Dict[str, Any]:
        return jsonable_encoder(BookingResponse.model_validate(booking))

    # ---------- public API ----------
    def notify_new_booking(self, booking) -> None:
        try:
            self._dispatch(BROADCAST_ROOM, EVENT_NEW_BOOKING, self._booking_payload(booking))
        except Exception:
            logger.exception(f"[notification_relay] Failed to publish new booking {booking.booking_id}")

    def notify_status_change(self, booking) -> None:
        try:
            payload = self._booking_payload(booking)
            self._dispatch(BROADCAST_ROOM, EVENT_BOOKING_STATUS, payload)

            driver_code = booking.driver.driver_id if booking.driver is not None else None
            if driver_code:
                self._dispatch(driver_room(driver_code), EVENT_DRIVER_BOOKING, payload)
        except Exception:
            logger.exception(f"[notification_relay] Failed to publish status change for {booking.booking_id}")

    def notify_driver_status_change(self, driver_id: str, status: str) -> None:
        try:
            self._dispatch(ADMIN_ROOM, EVENT_DRIVER_STATUS, {"driver_id": driver_id, "status": status})
        except Exception:
            logger.exception(f"[notification_relay] Failed to publish driver status for {driver_id}")


notification_relay = NotificationRelay()


def get_notifier() -> NotificationRelay:
    return notification_relay
