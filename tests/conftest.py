"""Test configuration and fixtures."""
import json

import pytest

from chat_relay import RateLimiter, RoomRegistry, Broadcaster, SessionHandler


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


class FakeWebSocket:
    """Records every frame sent to it."""

    def __init__(self):
        self.sent = []

    async def send_text(self, text: str):
        self.sent.append(json.loads(text))

    def events(self, name=None):
        return [(f["event"], f["data"]) for f in self.sent if name is None or f["event"] == name]

    def clear(self):
        self.sent.clear()


class BrokenWebSocket(FakeWebSocket):
    async def send_text(self, text: str):
        raise ConnectionError("socket gone")


class Relay:
    """One registry with its collaborators, plus helpers to open connections."""

    def __init__(self, clock=None):
        self.clock = clock or FakeClock()
        self.rate_limiter = RateLimiter(clock=self.clock)
        self.registry = RoomRegistry(self.rate_limiter)
        self.broadcaster = Broadcaster(self.registry)
        self.sockets = {}

    def connect(self, connection_id: str, websocket=None):
        websocket = websocket or FakeWebSocket()
        self.sockets[connection_id] = websocket
        self.broadcaster.register(connection_id, websocket)
        return SessionHandler(connection_id, self.registry, self.broadcaster, self.rate_limiter), websocket


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def relay(clock):
    return Relay(clock)
