"""
Logging for the room chat relay

Lines are "CATEGORY: name | key=value | ..." so that one connection or
room can be followed with grep.
"""

import logging
import sys
from typing import Any
from .constants import ERROR_KINDS, LOG_LEVEL

RELAY_LOGGER = "chat_relay"

# Kinds accepted by log_security_event
SECURITY_KINDS = frozenset(ERROR_KINDS.values())

def get_logger(name: str = RELAY_LOGGER) -> logging.Logger:
    """Relay logger writing to stdout at LOG_LEVEL, kept apart from uvicorn's handlers"""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        logger.addHandler(handler)
        logger.setLevel(LOG_LEVEL)
        logger.propagate = False

    return logger

def _fields(**fields: Any) -> str:
    return " | ".join(f"{key}={value}" for key, value in fields.items() if value is not None)

def log_security_event(kind: str, connection_id: str, **details: Any):
    """
    Log a rejected client action

    Args:
        kind: One of the error kinds (InvalidInput, UsernameTaken, AlreadyBound,
            Unauthorized, RateLimited, InternalFault); InternalFault logs at error level
        connection_id: Connection the action came from
        details: Extra key=value context, e.g. error key or offending field
    """
    if kind not in SECURITY_KINDS:
        raise ValueError(f"Unknown error kind: {kind}")

    level = logging.ERROR if kind == "InternalFault" else logging.WARNING
    get_logger().log(level, f"SECURITY_EVENT: {kind} | {_fields(conn=connection_id, **details)}")

def log_connection_event(action: str, connection_id: str, room: str, username: str):
    """Membership change: join, leave or disconnect"""
    get_logger().info(f"CONNECTION_EVENT: {action} | {_fields(conn=connection_id, room=room, user=username)}")

def log_message_event(action: str, message_id: str, room: str, author: str, recipients: int):
    get_logger().info(
        f"MESSAGE_EVENT: {action} | {_fields(id=message_id[:8], room=room, user=author, recipients=recipients)}"
    )

def log_websocket_event(event_type: str, connection_id: str, **details: Any):
    """Transport lifecycle, logged at debug level"""
    get_logger().debug(f"WEBSOCKET_EVENT: {event_type} | {_fields(conn=connection_id, **details)}")

def log_system_event(event_type: str, **details: Any):
    """Process lifecycle: startup and shutdown"""
    get_logger().info(f"SYSTEM_EVENT: {event_type} | {_fields(**details)}")
