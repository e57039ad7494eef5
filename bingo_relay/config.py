"""
Configuration constants for the bingo relay service.
"""
import os

# Server settings
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# Static client assets (index.html, scripts). Skipped when the directory is missing.
STATIC_DIR = os.getenv("STATIC_DIR", "public")

# Transport-level ping run by uvicorn; browsers answer it without client code.
WS_PING_INTERVAL_SEC = float(os.getenv("WS_PING_INTERVAL_SEC", "30"))
WS_PING_TIMEOUT_SEC = float(os.getenv("WS_PING_TIMEOUT_SEC", "30"))

# Seconds between app-level {"type": "ping"} probes. 0 (default) disables the
# monitor; enable only for clients that keep sending frames or answer with pong.
LIVENESS_INTERVAL_SEC = float(os.getenv("LIVENESS_INTERVAL_SEC", "0"))

# Upper bound for a single outbound frame write (seconds)
SEND_TIMEOUT_SEC = float(os.getenv("SEND_TIMEOUT_SEC", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Tracing
OTEL_ENABLED = os.getenv("OTEL_ENABLED", "false").lower() in ("1", "true", "yes")
OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "bingo-relay")
OTLP_COLLECTOR_URL = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://otel-collector:4318").rstrip("/")
OTLP_TRACES_URL = os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", f"{OTLP_COLLECTOR_URL}/v1/traces")
