"""
FastAPI application for the bingo relay.

Endpoints:
- WS /ws and WS /: the relay channel (JSON text frames)
- GET /healthz: health check with live session counts
- /: static client assets, when STATIC_DIR exists
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import CORS_ORIGINS, LIVENESS_INTERVAL_SEC, LOG_LEVEL, OTEL_ENABLED, STATIC_DIR
from .liveness import LivenessMonitor
from .registry import Registry
from .router import MessageRouter
from .tracing import init_tracing
from .websocket import ConnectionManager

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the session state at startup and tear it down at shutdown."""
    logger.info("Starting up bingo relay...")
    connections = ConnectionManager()
    registry = Registry()
    router = MessageRouter(registry, connections)
    monitor = LivenessMonitor(connections, router, LIVENESS_INTERVAL_SEC)

    app.state.connections = connections
    app.state.registry = registry
    app.state.router = router
    app.state.monitor = monitor

    monitor.start()
    yield
    logger.info("Shutting down bingo relay...")
    await monitor.stop()
    for connection in await connections.snapshot():
        await connection.terminate()


app = FastAPI(
    title="Bingo Relay",
    description="Live message relay between a bingo admin and its players",
    version="1.0.0",
    lifespan=lifespan,
)

if OTEL_ENABLED:
    init_tracing(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
async def healthz(request: Request):
    registry: Registry = request.app.state.registry
    connections: ConnectionManager = request.app.state.connections
    return {
        "status": "ok",
        "players": len(await registry.snapshot_player_keys()),
        "admin": await registry.get_admin() is not None,
        "connections": await connections.count(),
    }


async def relay_websocket(websocket: WebSocket):
    connections: ConnectionManager = websocket.app.state.connections
    router: MessageRouter = websocket.app.state.router

    connection = await connections.connect(websocket)
    logger.info(f"[ws] Connection opened from {websocket.client}")
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            if raw is not None:
                await router.handle(connection, raw)
    finally:
        await router.on_close(connection)


# Browser clients served from STATIC_DIR connect to the page origin.
app.add_api_websocket_route("/ws", relay_websocket)
app.add_api_websocket_route("/", relay_websocket)

# Must stay after the websocket routes
if os.path.isdir(STATIC_DIR):
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
else:
    logger.info(f"[config] STATIC_DIR={STATIC_DIR} not found, static assets disabled")
