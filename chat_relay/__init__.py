"""
Room Chat Relay core
In-memory room registry, validation, rate limiting and event broadcast
"""

from .models import (
    Member,
    SessionBinding,
    SessionState,
    RoomInfo,
    ChatMessage,
    JoinRoomRequest,
    SendMessageRequest,
    TypingRequest,
    LeaveRoomRequest
)
from .validators import is_valid_username, is_valid_room_id, is_valid_message, validate_event_payload
from .rate_limiter import RateLimiter
from .room_registry import RoomRegistry
from .broadcaster import Broadcaster
from .session_handler import SessionHandler
from .status import StatusQuery
from .constants import *
from .logger import (
    get_logger,
    log_security_event,
    log_connection_event,
    log_message_event,
    log_websocket_event,
    log_system_event
)

__all__ = [
    'Member',
    'SessionBinding',
    'SessionState',
    'RoomInfo',
    'ChatMessage',
    'JoinRoomRequest',
    'SendMessageRequest',
    'TypingRequest',
    'LeaveRoomRequest',
    'is_valid_username',
    'is_valid_room_id',
    'is_valid_message',
    'validate_event_payload',
    'RateLimiter',
    'RoomRegistry',
    'Broadcaster',
    'SessionHandler',
    'StatusQuery',
    'get_logger',
    'log_security_event',
    'log_connection_event',
    'log_message_event',
    'log_websocket_event',
    'log_system_event'
]
