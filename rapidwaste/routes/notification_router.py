from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from rapidwaste.core.logging_config import get_logger
from rapidwaste.services.notification_service import notification_relay

logger = get_logger(__name__)
router = APIRouter(tags=["notifications"])


@router.websocket("/ws/notifications")
async def notifications(websocket: WebSocket, room: Optional[str] = Query(None)):
    """
    Live updates for dashboards. ``room`` is ``admin`` or ``driver-<code>``;
    every client also receives broadcast events.
    """
    await notification_relay.connect(websocket, room)
    try:
        while True:
            # Inbound messages are ignored; reading detects disconnects
            await websocket.receive_text()
    except WebSocketDisconnect:
        notification_relay.disconnect(websocket)
