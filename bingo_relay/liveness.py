import asyncio
import logging
from typing import Optional

from .connection import Connection
from .router import MessageRouter
from .websocket import ConnectionManager

logger = logging.getLogger(__name__)


class LivenessMonitor:
    """
    Probes every connection on a fixed interval.

    A connection that has sent no frame at all (``pong`` included) since the
    previous probe is terminated and handled exactly like a normal close.
    """

    def __init__(self, connections: ConnectionManager, router: MessageRouter, interval: float) -> None:
        self.connections = connections
        self.router = router
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    async def _check(self, connection: Connection) -> bool:
        if connection.is_alive:
            await connection.probe()
            return False
        logger.info(f"[liveness] Evicting unresponsive {connection!r}")
        await connection.terminate()
        await self.router.on_close(connection)
        return True

    async def run_cycle(self) -> int:
        """Run one probe pass. Returns how many connections were evicted."""
        results = await asyncio.gather(*(self._check(c) for c in await self.connections.snapshot()))
        return sum(results)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.run_cycle()
            except Exception as exc:
                logger.error(f"[liveness] Probe cycle failed: {exc!r}")

    def start(self) -> None:
        if self.interval <= 0:
            logger.info("[liveness] Disabled (interval <= 0)")
            return
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info(f"[liveness] Probing every {self.interval}s")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
