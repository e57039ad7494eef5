import asyncio
import os

# Keep the app deterministic under test: no background probes, no static mount.
os.environ.setdefault("LIVENESS_INTERVAL_SEC", "0")
os.environ.setdefault("STATIC_DIR", os.path.join(os.path.dirname(__file__), "no-static"))

from dataclasses import dataclass, field
from typing import List

import pytest
from starlette.websockets import WebSocketState

from bingo_relay.registry import Registry
from bingo_relay.router import MessageRouter
from bingo_relay.websocket import ConnectionManager


class FakeWebSocket:
    """Records outbound frames instead of writing them to a socket."""

    def __init__(self, fail_sends: bool = False, stall: bool = False):
        self.client_state = WebSocketState.CONNECTING
        self.sent: List[dict] = []
        self.fail_sends = fail_sends
        self.stall = stall
        self.close_code = None

    async def accept(self):
        self.client_state = WebSocketState.CONNECTED

    async def send_json(self, message: dict):
        if self.fail_sends:
            raise RuntimeError("socket went away")
        if self.stall:
            await asyncio.sleep(60)
        self.sent.append(message)

    async def close(self, code: int = 1000):
        self.close_code = code
        self.client_state = WebSocketState.DISCONNECTED

    def types(self) -> List[str]:
        return [m["type"] for m in self.sent]

    def last(self, message_type: str) -> dict:
        matches = [m for m in self.sent if m["type"] == message_type]
        assert matches, f"no {message_type!r} frame in {self.sent}"
        return matches[-1]


@dataclass
class Relay:
    connections: ConnectionManager = field(default_factory=ConnectionManager)
    registry: Registry = field(default_factory=Registry)
    router: MessageRouter = field(init=False)

    def __post_init__(self):
        self.router = MessageRouter(self.registry, self.connections)

    async def open(self, **kwargs):
        """Accept a fake peer. Returns (connection, fake websocket)."""
        ws = FakeWebSocket(**kwargs)
        connection = await self.connections.connect(ws)
        return connection, ws

    async def player(self, key: str):
        connection, ws = await self.open()
        await self.router.handle(connection, f'{{"type": "player-join", "playerKey": "{key}"}}')
        return connection, ws

    async def admin(self):
        connection, ws = await self.open()
        await self.router.handle(connection, '{"type": "admin-join"}')
        return connection, ws


@pytest.fixture()
def make_relay():
    """Relay components must be built inside the running event loop."""
    return Relay
