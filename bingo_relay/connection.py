import asyncio
import logging
from enum import Enum
from typing import Optional

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from .config import SEND_TIMEOUT_SEC

logger = logging.getLogger(__name__)


class Role(str, Enum):
    UNASSIGNED = "unassigned"
    PLAYER = "player"
    ADMIN = "admin"


class RoleConflict(Exception):
    """A connection tried to take a second, different role."""


class Connection:
    """One live peer channel plus the relay's bookkeeping for it."""

    def __init__(self, websocket: WebSocket, send_timeout: float = SEND_TIMEOUT_SEC) -> None:
        self.websocket = websocket
        self.send_timeout = send_timeout
        # one full interval of grace before the first eviction
        self.is_alive = True
        self.role = Role.UNASSIGNED
        self.player_key: Optional[str] = None
        self.closed = False

    def __repr__(self) -> str:
        who = self.player_key if self.role == Role.PLAYER else self.role.value
        return f"<Connection {who} alive={self.is_alive} closed={self.closed}>"

    def assign_player(self, player_key: str) -> None:
        if self.role == Role.PLAYER and self.player_key == player_key:
            return
        if self.role != Role.UNASSIGNED:
            raise RoleConflict(f"{self!r} cannot become player {player_key!r}")
        self.role = Role.PLAYER
        self.player_key = player_key

    def assign_admin(self) -> None:
        if self.role == Role.ADMIN:
            return
        if self.role != Role.UNASSIGNED:
            raise RoleConflict(f"{self!r} cannot become admin")
        self.role = Role.ADMIN

    @property
    def is_open(self) -> bool:
        return not self.closed and self.websocket.client_state == WebSocketState.CONNECTED

    async def send(self, message: dict) -> None:
        """Fire-and-forget write; failures are dropped, never raised."""
        if not self.is_open:
            return
        try:
            await asyncio.wait_for(self.websocket.send_json(message), timeout=self.send_timeout)
        except Exception as exc:
            logger.debug(f"[ws] Dropped {message.get('type')} frame to {self!r}: {exc!r}")

    async def probe(self) -> None:
        self.is_alive = False
        await self.send({"type": "ping"})

    def mark_alive(self) -> None:
        self.is_alive = True

    async def terminate(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await asyncio.wait_for(self.websocket.close(code=1001), timeout=self.send_timeout)
        except Exception as exc:
            logger.debug(f"[ws] Close failed for {self!r}: {exc!r}")
