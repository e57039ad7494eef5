import logging
import socket
import time
from urllib.parse import urlparse

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import OTEL_SERVICE_NAME, OTLP_COLLECTOR_URL, OTLP_TRACES_URL

logger = logging.getLogger(__name__)

_tracing_initialized = False


def _collector_reachable(url: str, attempts: int = 5) -> bool:
    parsed = urlparse(url)
    address = (parsed.hostname or "localhost", parsed.port or 4318)
    for _ in range(attempts):
        try:
            socket.create_connection(address, timeout=2).close()
            return True
        except OSError:
            time.sleep(1)
    return False


def init_tracing(app: FastAPI) -> bool:
    """Install the OTLP exporter and instrument the app. Returns True when active."""
    global _tracing_initialized
    if _tracing_initialized:
        return True

    if not _collector_reachable(OTLP_COLLECTOR_URL):
        logger.warning(f"[otel] Collector not reachable at {OTLP_COLLECTOR_URL}, tracing disabled")
        return False

    provider = TracerProvider(resource=Resource.create({"service.name": OTEL_SERVICE_NAME}))
    try:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=OTLP_TRACES_URL)))
        trace.set_tracer_provider(provider)
        FastAPIInstrumentor.instrument_app(app)
        _tracing_initialized = True
        logger.info(f"[otel] Tracing initialized for {OTEL_SERVICE_NAME} -> {OTLP_TRACES_URL}")
    except Exception as exc:
        logger.error(f"[otel] Failed to initialize tracing: {exc}")
    return _tracing_initialized
