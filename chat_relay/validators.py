"""
Input validation for the room chat relay
"""

from typing import Any, Optional, Tuple
from .constants import (
    MIN_USERNAME_LENGTH,
    MAX_USERNAME_LENGTH,
    MIN_ROOM_LENGTH,
    MAX_ROOM_LENGTH,
    MAX_MESSAGE_LENGTH,
    EVENT_JOIN_ROOM,
    EVENT_SEND_MESSAGE,
    EVENT_TYPING,
    EVENT_LEAVE_ROOM
)
from .models import JoinRoomRequest, SendMessageRequest, TypingRequest, LeaveRoomRequest

def is_valid_username(username: Any) -> bool:
    """True if username is a string whose trimmed length is within bounds"""
    if not isinstance(username, str):
        return False
    return MIN_USERNAME_LENGTH <= len(username.strip()) <= MAX_USERNAME_LENGTH

def is_valid_room_id(room: Any) -> bool:
    """True if room is a string whose trimmed length is within bounds"""
    if not isinstance(room, str):
        return False
    return MIN_ROOM_LENGTH <= len(room.strip()) <= MAX_ROOM_LENGTH

def is_valid_message(message: Any) -> bool:
    """True if message has visible content and its raw length is within bounds"""
    if not isinstance(message, str):
        return False
    return len(message.strip()) > 0 and len(message) <= MAX_MESSAGE_LENGTH

# event -> (field, expected type) pairs
_REQUIRED_FIELDS = {
    EVENT_JOIN_ROOM: (("room", str), ("username", str)),
    EVENT_SEND_MESSAGE: (("room", str), ("author", str), ("message", str)),
    EVENT_TYPING: (("room", str), ("username", str), ("isTyping", bool)),
    EVENT_LEAVE_ROOM: (),
}

def validate_event_payload(event: str, data: Any) -> Tuple[bool, str, Optional[Any]]:
    """
    Validate an inbound event payload and convert it to its request model

    Only the shape is checked here; length bounds are checked by the
    handler so that each field reports its own error.

    Args:
        event: Event name from the envelope
        data: Decoded payload

    Returns:
        Tuple of (is_valid, error_key, request)
    """
    if event not in _REQUIRED_FIELDS:
        return False, "unknown_event", None

    if event == EVENT_LEAVE_ROOM:
        # leave_room carries no fields; anything sent along is ignored
        return True, "", LeaveRoomRequest()

    if not isinstance(data, dict):
        return False, "invalid_payload", None

    for name, expected in _REQUIRED_FIELDS[event]:
        if not isinstance(data.get(name), expected):
            return False, "invalid_payload", None

    if event == EVENT_JOIN_ROOM:
        return True, "", JoinRoomRequest(room=data["room"], username=data["username"])
    if event == EVENT_SEND_MESSAGE:
        return True, "", SendMessageRequest(
            room=data["room"],
            author=data["author"],
            message=data["message"]
        )
    return True, "", TypingRequest(
        room=data["room"],
        username=data["username"],
        is_typing=data["isTyping"]
    )
