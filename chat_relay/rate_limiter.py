"""
Per-connection sliding-window message rate limiting
"""

import time
from typing import Callable, Dict, List
from .constants import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_MS

def _monotonic_ms() -> float:
    return time.monotonic() * 1000

class RateLimiter:
    """Allows at most max_messages per connection inside a trailing window"""

    def __init__(self, max_messages: int = RATE_LIMIT_MESSAGES,
                 window_ms: int = RATE_LIMIT_WINDOW_MS,
                 clock: Callable[[], float] = _monotonic_ms):
        self.max_messages = max_messages
        self.window_ms = window_ms
        self._clock = clock
        # connection_id -> timestamps (ms) of accepted messages, oldest first
        self._windows: Dict[str, List[float]] = {}

    def allow(self, connection_id: str) -> bool:
        """
        Record a message attempt if the connection is under its cap

        Rejected attempts are not recorded.

        Args:
            connection_id: Connection identifier

        Returns:
            True if the message may be sent
        """
        now = self._clock()
        recent = [ts for ts in self._windows.get(connection_id, []) if now - ts < self.window_ms]

        if len(recent) >= self.max_messages:
            self._windows[connection_id] = recent
            return False

        recent.append(now)
        self._windows[connection_id] = recent
        return True

    def reset(self, connection_id: str):
        """Drop all state kept for a connection"""
        self._windows.pop(connection_id, None)

    def tracked_connections(self) -> int:
        return len(self._windows)
