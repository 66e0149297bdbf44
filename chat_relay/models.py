"""
Data models for the room chat relay
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from .constants import MESSAGE_TYPE_SYSTEM, MESSAGE_TYPE_USER

def now_ms() -> int:
    """Milliseconds since the epoch"""
    return int(time.time() * 1000)

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class SessionState(Enum):
    """Lifecycle of one connection"""
    UNBOUND = "unbound"
    BOUND = "bound"
    CLOSED = "closed"

@dataclass
class Member:
    """A username attached to a room through one connection"""
    username: str
    connection_id: str
    joined_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {"username": self.username}

@dataclass(frozen=True)
class SessionBinding:
    """The room and identity a connection currently owns"""
    room: str
    username: str

@dataclass
class RoomInfo:
    """Monitoring snapshot of one room"""
    room: str
    user_count: int
    users: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "room": self.room,
            "userCount": self.user_count,
            "users": list(self.users)
        }

@dataclass
class ChatMessage:
    """User or system message delivered through receive_message"""
    type: str
    message: str
    timestamp: int = field(default_factory=now_ms)
    author: Optional[str] = None
    room: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def system(cls, text: str) -> "ChatMessage":
        return cls(type=MESSAGE_TYPE_SYSTEM, message=text)

    @classmethod
    def user(cls, room: str, author: str, text: str) -> "ChatMessage":
        """Build a user message; the text is trimmed and given a fresh id"""
        return cls(
            type=MESSAGE_TYPE_USER,
            message=text.strip(),
            author=author,
            room=room,
            id=str(uuid.uuid4())
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        data = {
            "type": self.type,
            "message": self.message,
            "timestamp": self.timestamp
        }
        if self.type == MESSAGE_TYPE_USER:
            data["room"] = self.room
            data["author"] = self.author
            data["id"] = self.id
        return data

# Inbound event payloads

@dataclass
class JoinRoomRequest:
    room: str
    username: str

@dataclass
class SendMessageRequest:
    room: str
    author: str
    message: str

@dataclass
class TypingRequest:
    room: str
    username: str
    is_typing: bool

@dataclass
class LeaveRoomRequest:
    pass
