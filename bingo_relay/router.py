"""
Message routing for the bingo relay.

``MessageRouter.handle`` is the single entry point for inbound frames. It
parses the frame, updates the registry and fans the result out as unicast to
a player, unicast to the admin, or broadcast to every live connection.
Nothing here answers the sender with an error: malformed frames and missing
targets are dropped.
"""
import logging
from typing import Union

from opentelemetry import trace

from .connection import Connection, RoleConflict
from .registry import Registry
from .schemas import (
    AdminJoin,
    AssignCartones,
    MessageParseError,
    NewNumber,
    PlayerJoin,
    Pong,
    Report,
    RequestPlayerList,
    ResetNumbers,
    parse_message,
)
from .websocket import ConnectionManager

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class MessageRouter:
    def __init__(self, registry: Registry, connections: ConnectionManager) -> None:
        self.registry = registry
        self.connections = connections
        self._handlers = {
            PlayerJoin: self._player_join,
            AdminJoin: self._admin_join,
            AssignCartones: self._assign_cartones,
            NewNumber: self._new_number,
            ResetNumbers: self._reset_numbers,
            Report: self._report,
            RequestPlayerList: self._request_player_list,
            Pong: self._pong,
        }

    async def handle(self, source: Connection, raw: Union[str, bytes]) -> None:
        # any inbound frame, even a malformed one, proves the peer is there
        source.mark_alive()
        try:
            message = parse_message(raw)
        except MessageParseError as exc:
            logger.debug(f"[router] Dropped frame from {source!r}: {exc}")
            return

        with tracer.start_as_current_span("relay.handle") as span:
            span.set_attribute("relay.message_type", message.type)
            span.set_attribute("relay.source_role", source.role.value)
            await self._handlers[type(message)](source, message)

    async def notify_admin_player_list(self) -> None:
        admin = await self.registry.get_admin()
        if admin is None:
            return
        players = await self.registry.snapshot_player_keys()
        await admin.send({"type": "player-list", "players": players})

    async def on_close(self, connection: Connection) -> None:
        """Forget a closed connection. Safe to call more than once."""
        if not await self.connections.disconnect(connection):
            return
        connection.closed = True
        await self.registry.unregister_by_connection(connection)
        logger.info(f"[router] Connection closed: {connection!r}")
        await self.notify_admin_player_list()

    async def _player_join(self, source: Connection, message: PlayerJoin) -> None:
        try:
            source.assign_player(message.player_key)
        except RoleConflict as exc:
            logger.warning(f"[router] Ignoring player-join: {exc}")
            return
        await self.registry.register_player(message.player_key, source)
        logger.info(f"[router] Player joined: {message.player_key}")

        history = await self.registry.current_history()
        await source.send({"type": "state", "lastNumbers": history})
        await self.notify_admin_player_list()

    async def _admin_join(self, source: Connection, message: AdminJoin) -> None:
        try:
            source.assign_admin()
        except RoleConflict as exc:
            logger.warning(f"[router] Ignoring admin-join: {exc}")
            return
        await self.registry.register_admin(source)
        logger.info("[router] Admin joined")

        players = await self.registry.snapshot_player_keys()
        history = await self.registry.current_history()
        await source.send({"type": "state", "players": players, "lastNumbers": history})

    async def _assign_cartones(self, source: Connection, message: AssignCartones) -> None:
        target = await self.registry.get_player(message.player_key)
        if target is not None:
            await target.send({"type": "assign-cartones", "cartones": message.cartones})
        else:
            logger.debug(f"[router] assign-cartones target not connected: {message.player_key}")

        admin = await self.registry.get_admin()
        if admin is not None:
            await admin.send(
                {
                    "type": "assign-confirm",
                    "playerKey": message.player_key,
                    "cartonesCount": len(message.cartones),
                }
            )

    async def _new_number(self, source: Connection, message: NewNumber) -> None:
        added = await self.registry.record_draw(message.number)
        if not added:
            logger.debug(f"[router] Number {message.number} already drawn, rebroadcasting")
        # announced even when already recorded
        await self.connections.broadcast({"type": "number", "number": message.number})

    async def _reset_numbers(self, source: Connection, message: ResetNumbers) -> None:
        await self.registry.reset_draws()
        logger.info("[router] Draw history reset")
        await self.connections.broadcast({"type": "reset"})

    async def _report(self, source: Connection, message: Report) -> None:
        admin = await self.registry.get_admin()
        if admin is None:
            logger.debug("[router] Report dropped, no admin connected")
            return
        await admin.send({"type": "report", "report": message.report})

    async def _request_player_list(self, source: Connection, message: RequestPlayerList) -> None:
        await self.notify_admin_player_list()

    async def _pong(self, source: Connection, message: Pong) -> None:
        # handle() already marked the source alive
        pass
