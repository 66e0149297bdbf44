"""
Read-only monitoring snapshots
"""

from typing import Any, Dict, List
from .models import utcnow
from .room_registry import RoomRegistry

class StatusQuery:
    """Projects registry state for the health and room listing endpoints"""

    def __init__(self, registry: RoomRegistry):
        self._registry = registry

    async def health(self) -> Dict[str, Any]:
        stats = await self._registry.get_connection_stats()
        return {
            "status": "healthy",
            "timestamp": utcnow().isoformat(),
            "activeRooms": stats["active_rooms"],
            "activeUsers": stats["active_users"]
        }

    async def rooms(self) -> List[Dict[str, Any]]:
        return [info.to_dict() for info in await self._registry.list_rooms()]
