from asyncio import Lock
from typing import Dict, List, Optional

from .connection import Connection


class Registry:
    """
    Session state shared by every connection: who is playing, who is the
    admin, and which numbers have been drawn.

    One instance lives for the lifetime of the app. All access goes through
    the lock so concurrent handlers and the liveness monitor see consistent
    state.
    """

    def __init__(self) -> None:
        self._players: Dict[str, Connection] = {}
        self._admin: Optional[Connection] = None
        self._draw_history: List[int] = []
        self._lock = Lock()

    async def register_player(self, player_key: str, connection: Connection) -> None:
        # last join wins; an older connection for this key is unlinked, not closed
        async with self._lock:
            self._players[player_key] = connection

    async def register_admin(self, connection: Connection) -> None:
        async with self._lock:
            self._admin = connection

    async def unregister_by_connection(self, connection: Connection) -> bool:
        """
        Drop whatever this connection is registered as.

        Player entries are matched by connection, not key, so a stale close
        cannot evict a newer connection that rejoined under the same key.
        Returns True if anything was removed.
        """
        async with self._lock:
            removed = False
            for key, stored in list(self._players.items()):
                if stored is connection:
                    del self._players[key]
                    removed = True
            if self._admin is connection:
                self._admin = None
                removed = True
            return removed

    async def get_player(self, player_key: str) -> Optional[Connection]:
        async with self._lock:
            return self._players.get(player_key)

    async def get_admin(self) -> Optional[Connection]:
        async with self._lock:
            return self._admin

    async def record_draw(self, number: int) -> bool:
        async with self._lock:
            if number in self._draw_history:
                return False
            self._draw_history.append(number)
            return True

    async def reset_draws(self) -> None:
        async with self._lock:
            self._draw_history = []

    async def snapshot_player_keys(self) -> List[str]:
        async with self._lock:
            return list(self._players.keys())

    async def current_history(self) -> List[int]:
        async with self._lock:
            return list(self._draw_history)
