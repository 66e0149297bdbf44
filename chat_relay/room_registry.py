"""
Room membership registry

Owns every room, its members and the connection -> binding map. All
mutation goes through the methods below while holding one lock, so a
uniqueness check and the insert that follows it can never interleave
with another join.
"""

import asyncio
from typing import Dict, List, Optional, Tuple
from .models import Member, RoomInfo, SessionBinding
from .rate_limiter import RateLimiter
from .validators import is_valid_username, is_valid_room_id
from .logger import get_logger, log_connection_event

logger = get_logger()

class RoomRegistry:
    """In-memory room and connection registry"""

    def __init__(self, rate_limiter: Optional[RateLimiter] = None):
        # Room -> members in join order
        self._rooms: Dict[str, List[Member]] = {}
        # Connection -> (room, username)
        self._bindings: Dict[str, SessionBinding] = {}
        self._rate_limiter = rate_limiter
        self._lock = asyncio.Lock()

    async def join_room(self, connection_id: str, room: str, username: str) -> Tuple[bool, List[Member], str]:
        """
        Add a connection to a room under a display name

        Args:
            connection_id: Connection identifier
            room: Room id (trimmed before use)
            username: Display name (trimmed before use)

        Returns:
            Tuple of (success, members of the room after the join, error_key)
        """
        if not is_valid_username(username):
            return False, [], "invalid_username"

        if not is_valid_room_id(room):
            return False, [], "invalid_room"

        clean_room = room.strip()
        clean_username = username.strip()

        async with self._lock:
            if connection_id in self._bindings:
                return False, [], "already_bound"

            members = self._rooms.get(clean_room, [])
            wanted = clean_username.lower()
            if any(member.username.lower() == wanted for member in members):
                logger.info(f"Username taken: {clean_username} in {clean_room}")
                return False, [], "username_taken"

            if clean_room not in self._rooms:
                self._rooms[clean_room] = members
                logger.info(f"Room created: {clean_room}")

            members.append(Member(username=clean_username, connection_id=connection_id))
            self._bindings[connection_id] = SessionBinding(room=clean_room, username=clean_username)

            log_connection_event("join", connection_id, clean_room, clean_username)
            return True, list(members), ""

    async def leave_room(self, connection_id: str) -> Optional[SessionBinding]:
        """
        Remove a connection from its room

        Also forgets the connection's rate-limit window and deletes the
        room once it is empty.

        Args:
            connection_id: Connection identifier

        Returns:
            The binding that was released, or None if the connection was not in a room
        """
        async with self._lock:
            binding = self._bindings.pop(connection_id, None)
            if binding is None:
                return None

            remaining = [m for m in self._rooms.get(binding.room, []) if m.connection_id != connection_id]
            if remaining:
                self._rooms[binding.room] = remaining
            else:
                self._rooms.pop(binding.room, None)
                logger.info(f"Room deleted: {binding.room} (empty)")

            if self._rate_limiter is not None:
                self._rate_limiter.reset(connection_id)

            log_connection_event("leave", connection_id, binding.room, binding.username)
            return binding

    async def current_members(self, room: str) -> List[Member]:
        """Snapshot of a room's members in join order; empty if the room does not exist"""
        async with self._lock:
            return list(self._rooms.get(room, []))

    async def binding(self, connection_id: str) -> Optional[SessionBinding]:
        async with self._lock:
            return self._bindings.get(connection_id)

    async def list_rooms(self) -> List[RoomInfo]:
        """
        Get a snapshot of every active room

        Returns:
            List of RoomInfo objects
        """
        async with self._lock:
            return [
                RoomInfo(room=room, user_count=len(members), users=[m.username for m in members])
                for room, members in self._rooms.items()
            ]

    async def get_connection_stats(self) -> Dict[str, int]:
        """
        Get overall registry statistics

        Returns:
            Dictionary with room and bound connection counts
        """
        async with self._lock:
            return {
                "active_rooms": len(self._rooms),
                "active_users": len(self._bindings)
            }
