import uvicorn

from .config import HOST, PORT, WS_PING_INTERVAL_SEC, WS_PING_TIMEOUT_SEC


def main():
    print(f"[config] Serving bingo relay on http://{HOST}:{PORT}")
    # uvicorn closes sockets whose peer misses a transport pong; that close
    # reaches MessageRouter.on_close through the endpoint's finally block
    uvicorn.run(
        "bingo_relay.main:app",
        host=HOST,
        port=PORT,
        ws_ping_interval=WS_PING_INTERVAL_SEC,
        ws_ping_timeout=WS_PING_TIMEOUT_SEC,
    )


if __name__ == "__main__":
    main()
