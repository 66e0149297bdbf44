"""
Configuration constants for the room chat relay

Every tunable can be overridden through the environment.
"""

import os

# Server settings
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 4000))
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:5173,http://localhost:3000,http://localhost:4000,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]

# Identity and message limits
MIN_USERNAME_LENGTH = int(os.getenv("MIN_USERNAME_LENGTH", 2))
MAX_USERNAME_LENGTH = int(os.getenv("MAX_USERNAME_LENGTH", 20))
MIN_ROOM_LENGTH = int(os.getenv("MIN_ROOM_LENGTH", 2))
MAX_ROOM_LENGTH = int(os.getenv("MAX_ROOM_LENGTH", 20))
MAX_MESSAGE_LENGTH = int(os.getenv("MAX_MESSAGE_LENGTH", 500))

# Rate limiting (sliding window per connection)
RATE_LIMIT_MESSAGES = int(os.getenv("RATE_LIMIT_MESSAGES", 10))
RATE_LIMIT_WINDOW_MS = int(os.getenv("RATE_LIMIT_WINDOW_MS", 5000))

# WebSocket settings
MAX_PAYLOAD_BYTES = int(os.getenv("MAX_PAYLOAD_BYTES", 1000000))
WS_PING_INTERVAL = float(os.getenv("WS_PING_INTERVAL", 25))
WS_PING_TIMEOUT = float(os.getenv("WS_PING_TIMEOUT", 60))

# Logging levels
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Events consumed from a connection
EVENT_JOIN_ROOM = "join_room"
EVENT_SEND_MESSAGE = "send_message"
EVENT_TYPING = "typing"
EVENT_LEAVE_ROOM = "leave_room"

# Events emitted to connections
EVENT_ROOM_USERS = "room_users"
EVENT_USER_LIST_UPDATE = "user_list_update"
EVENT_RECEIVE_MESSAGE = "receive_message"
EVENT_USER_TYPING = "user_typing"
EVENT_ERROR = "error"

MESSAGE_TYPE_SYSTEM = "system"
MESSAGE_TYPE_USER = "user"

# Error taxonomy
ERROR_KINDS = {
    "invalid_username": "InvalidInput",
    "invalid_room": "InvalidInput",
    "invalid_message": "InvalidInput",
    "invalid_payload": "InvalidInput",
    "invalid_json": "InvalidInput",
    "unknown_event": "InvalidInput",
    "payload_too_large": "InvalidInput",
    "username_taken": "UsernameTaken",
    "already_bound": "AlreadyBound",
    "unauthorized": "Unauthorized",
    "rate_limit": "RateLimited",
    "internal": "InternalFault",
}

# Error messages
ERROR_MESSAGES = {
    "invalid_username": f"Invalid username. Use {MIN_USERNAME_LENGTH}-{MAX_USERNAME_LENGTH} characters.",
    "invalid_room": f"Invalid room ID. Use {MIN_ROOM_LENGTH}-{MAX_ROOM_LENGTH} characters.",
    "invalid_message": "Invalid message",
    "invalid_payload": "Invalid payload",
    "invalid_json": "Invalid JSON format",
    "unknown_event": "Unknown event",
    "payload_too_large": "Payload too large",
    "username_taken": "Username already taken in this room.",
    "already_bound": "Already in a room. Leave it before joining another.",
    "unauthorized": "Unauthorized message",
    "rate_limit": "Too many messages. Please slow down.",
    "internal": "Internal server error",
}

# Generic text reported when a handler fails unexpectedly
INTERNAL_ERROR_MESSAGES = {
    EVENT_JOIN_ROOM: "Failed to join room",
    EVENT_SEND_MESSAGE: "Failed to send message",
    EVENT_LEAVE_ROOM: "Failed to leave room",
}
