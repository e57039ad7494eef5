from typing import List, Set
from asyncio import Lock, gather

from fastapi import WebSocket

from .connection import Connection


class ConnectionManager:
    """Every accepted connection, whatever its role. Broadcasts go to all of them."""

    def __init__(self) -> None:
        self._connections: Set[Connection] = set()
        self._lock = Lock()

    async def connect(self, websocket: WebSocket) -> Connection:
        await websocket.accept()
        connection = Connection(websocket)
        async with self._lock:
            self._connections.add(connection)
        return connection

    async def disconnect(self, connection: Connection) -> bool:
        """Forget a connection. Returns False if it was already gone."""
        async with self._lock:
            if connection not in self._connections:
                return False
            self._connections.remove(connection)
            return True

    async def snapshot(self) -> List[Connection]:
        async with self._lock:
            return list(self._connections)

    async def count(self) -> int:
        async with self._lock:
            return len(self._connections)

    async def broadcast(self, message: dict):
        # concurrent, so stalled peers cost one send timeout in total.
        # Connection.send swallows its own failures.
        await gather(*(connection.send(message) for connection in await self.snapshot()))
