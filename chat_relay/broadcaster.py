"""
Event delivery to single connections and whole rooms
"""

import json
from typing import Any, Dict, Optional
from .room_registry import RoomRegistry
from .logger import get_logger, log_websocket_event

logger = get_logger()

class Broadcaster:
    """Sends named events over the registered WebSocket connections"""

    def __init__(self, registry: RoomRegistry):
        self._registry = registry
        # connection_id -> WebSocket
        self._connections: Dict[str, Any] = {}

    def register(self, connection_id: str, websocket: Any):
        self._connections[connection_id] = websocket
        log_websocket_event("registered", connection_id, open=len(self._connections))

    def unregister(self, connection_id: str):
        self._connections.pop(connection_id, None)
        log_websocket_event("unregistered", connection_id, open=len(self._connections))

    def connection_count(self) -> int:
        return len(self._connections)

    async def emit_to(self, connection_id: str, event: str, payload: Any) -> bool:
        """
        Send an event to one connection

        Args:
            connection_id: Target connection
            event: Event name
            payload: JSON-serializable payload

        Returns:
            True if the frame was handed to the transport
        """
        websocket = self._connections.get(connection_id)
        if websocket is None:
            log_websocket_event("emit_skipped", connection_id, event=event, reason="not connected")
            return False

        try:
            await websocket.send_text(json.dumps({"event": event, "data": payload}))
            return True
        except Exception as e:
            # One broken socket must not stop delivery to the rest of the room
            logger.error(f"Failed to send {event} to {connection_id}: {e}")
            return False

    async def emit_to_room(self, room: str, event: str, payload: Any,
                           exclude_connection_id: Optional[str] = None) -> int:
        """
        Send an event to every current member of a room

        Membership is read from the registry at call time.

        Args:
            room: Room id
            event: Event name
            payload: JSON-serializable payload
            exclude_connection_id: Connection to skip (usually the sender)

        Returns:
            Number of successful recipients
        """
        members = await self._registry.current_members(room)
        successful_sends = 0

        for member in members:
            if member.connection_id == exclude_connection_id:
                continue
            if await self.emit_to(member.connection_id, event, payload):
                successful_sends += 1

        log_websocket_event("room_broadcast", exclude_connection_id or "-",
                            event=event, room=room, recipients=successful_sends)
        return successful_sends
