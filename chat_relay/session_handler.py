"""
Per-connection event dispatcher
"""

import json
from typing import Any
from .constants import (
    MAX_PAYLOAD_BYTES,
    EVENT_JOIN_ROOM,
    EVENT_SEND_MESSAGE,
    EVENT_TYPING,
    EVENT_LEAVE_ROOM,
    EVENT_ROOM_USERS,
    EVENT_USER_LIST_UPDATE,
    EVENT_RECEIVE_MESSAGE,
    EVENT_USER_TYPING,
    EVENT_ERROR,
    ERROR_KINDS,
    ERROR_MESSAGES,
    INTERNAL_ERROR_MESSAGES
)
from .models import ChatMessage, SessionBinding, SessionState
from .validators import is_valid_username, is_valid_room_id, is_valid_message, validate_event_payload
from .rate_limiter import RateLimiter
from .room_registry import RoomRegistry
from .broadcaster import Broadcaster
from .logger import (
    get_logger,
    log_security_event,
    log_connection_event,
    log_message_event,
    log_websocket_event
)

logger = get_logger()

class SessionHandler:
    """
    Handles the events of one connection

    State moves UNBOUND -> BOUND on a successful join, back to UNBOUND on
    leave, and to CLOSED on disconnect. Every failure is reported to this
    connection only.
    """

    def __init__(self, connection_id: str, registry: RoomRegistry,
                 broadcaster: Broadcaster, rate_limiter: RateLimiter):
        self.connection_id = connection_id
        self.state = SessionState.UNBOUND
        self._registry = registry
        self._broadcaster = broadcaster
        self._rate_limiter = rate_limiter

    async def handle_frame(self, raw: str):
        """
        Decode one {"event", "data"} text frame and dispatch it

        Args:
            raw: Text frame received from the transport
        """
        size = len(raw.encode("utf-8"))
        if size > MAX_PAYLOAD_BYTES:
            await self._send_error("payload_too_large", bytes=size)
            return

        try:
            envelope = json.loads(raw)
        except (ValueError, RecursionError) as e:
            # RecursionError comes from pathologically nested arrays/objects
            await self._send_error("invalid_json", reason=type(e).__name__)
            return

        if not isinstance(envelope, dict) or not isinstance(envelope.get("event"), str):
            await self._send_error("invalid_payload")
            return

        await self.dispatch(envelope["event"], envelope.get("data"))

    async def handle_binary_frame(self, data: bytes):
        """Binary frames are not part of the protocol"""
        await self._send_error("invalid_payload", bytes=len(data))

    async def dispatch(self, event: str, data: Any):
        """
        Validate a payload and run the matching handler

        Unexpected exceptions are logged and reported with a generic message.

        Args:
            event: Event name
            data: Decoded payload
        """
        if self.state is SessionState.CLOSED:
            log_websocket_event("event_after_close", self.connection_id, event=event)
            return

        is_valid, error_key, request = validate_event_payload(event, data)
        if not is_valid:
            # Typing indicators are best-effort
            if event != EVENT_TYPING:
                await self._send_error(error_key)
            return

        try:
            if event == EVENT_JOIN_ROOM:
                await self.on_join(request.room, request.username)
            elif event == EVENT_SEND_MESSAGE:
                await self.on_message(request.room, request.author, request.message)
            elif event == EVENT_TYPING:
                await self.on_typing(request.room, request.username, request.is_typing)
            elif event == EVENT_LEAVE_ROOM:
                await self.on_leave()
        except Exception as e:
            logger.exception(f"Handler error for {event} on {self.connection_id}")
            log_security_event("InternalFault", self.connection_id, event=event, error=type(e).__name__)
            if event != EVENT_TYPING:
                await self._broadcaster.emit_to(
                    self.connection_id,
                    EVENT_ERROR,
                    INTERNAL_ERROR_MESSAGES.get(event, ERROR_MESSAGES["internal"])
                )

    async def on_join(self, room: str, username: str):
        success, members, error_key = await self._registry.join_room(self.connection_id, room, username)
        if not success:
            await self._send_error(error_key)
            return

        self.state = SessionState.BOUND
        binding = await self._registry.binding(self.connection_id)

        await self._broadcaster.emit_to(
            self.connection_id,
            EVENT_ROOM_USERS,
            [m.to_dict() for m in members if m.connection_id != self.connection_id]
        )
        await self._broadcast_user_list(binding.room)
        await self._broadcaster.emit_to_room(
            binding.room,
            EVENT_RECEIVE_MESSAGE,
            ChatMessage.system(f"{binding.username} joined the room").to_dict(),
            exclude_connection_id=self.connection_id
        )

    async def on_message(self, room: str, author: str, text: str):
        if not self._rate_limiter.allow(self.connection_id):
            await self._send_error("rate_limit")
            return

        if not is_valid_room_id(room):
            await self._send_error("invalid_room")
            return
        if not is_valid_username(author):
            await self._send_error("invalid_username")
            return
        if not is_valid_message(text):
            await self._send_error("invalid_message")
            return

        binding = await self._registry.binding(self.connection_id)
        if binding is None or binding.room != room or binding.username != author:
            await self._send_error("unauthorized", room=room, author=author, bound=binding)
            return

        message = ChatMessage.user(binding.room, binding.username, text)
        recipients = await self._broadcaster.emit_to_room(binding.room, EVENT_RECEIVE_MESSAGE, message.to_dict())
        log_message_event("broadcast", message.id, binding.room, binding.username, recipients)

    async def on_typing(self, room: str, username: str, is_typing: bool):
        binding = await self._registry.binding(self.connection_id)
        if binding is None or binding.room != room or binding.username != username:
            return

        await self._broadcaster.emit_to_room(
            binding.room,
            EVENT_USER_TYPING,
            {"username": binding.username, "isTyping": is_typing},
            exclude_connection_id=self.connection_id
        )

    async def on_leave(self):
        released = await self._registry.leave_room(self.connection_id)
        if released is None:
            return

        self.state = SessionState.UNBOUND
        await self._announce_departure(released)

    async def on_disconnect(self):
        """Release everything held by the connection; the session is closed afterwards"""
        released = await self._registry.leave_room(self.connection_id)
        self._rate_limiter.reset(self.connection_id)
        self.state = SessionState.CLOSED

        if released is not None:
            log_connection_event("disconnect", self.connection_id, released.room, released.username)
            await self._announce_departure(released)

    async def _announce_departure(self, released: SessionBinding):
        # Nobody left to tell once the room is gone
        if not await self._registry.current_members(released.room):
            return

        await self._broadcaster.emit_to_room(
            released.room,
            EVENT_RECEIVE_MESSAGE,
            ChatMessage.system(f"{released.username} left the room").to_dict()
        )
        await self._broadcast_user_list(released.room)

    async def _broadcast_user_list(self, room: str):
        members = await self._registry.current_members(room)
        await self._broadcaster.emit_to_room(room, EVENT_USER_LIST_UPDATE, [m.to_dict() for m in members])

    async def _send_error(self, error_key: str, **details):
        log_security_event(ERROR_KINDS[error_key], self.connection_id, error=error_key, **details)
        await self._broadcaster.emit_to(self.connection_id, EVENT_ERROR, ERROR_MESSAGES[error_key])
