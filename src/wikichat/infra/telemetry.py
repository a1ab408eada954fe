"""OpenTelemetry bootstrap: tracing initialisation and helpers.

Configures a ``TracerProvider`` with an OTLP HTTP exporter when tracing is
enabled via ``TracingConfig``.  When disabled the module is a graceful no-op
and ``tracer`` hands out non-recording spans.

Auto-instrumentations wired here:

- **FastAPI** (inbound HTTP spans)
- **httpx** (outbound HTTP spans, covering the OpenAI, Cohere and Astra
  Data API clients)

Usage::

    from wikichat.infra.telemetry import SPAN_CHAT_RETRIEVE, tracer

    with tracer.start_as_current_span(SPAN_CHAT_RETRIEVE) as span:
        ...
"""

from __future__ import annotations

import base64
import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.trace import format_trace_id

from wikichat.configs.system import TracingConfig

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("wikichat")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------

SPAN_CHAT_RETRIEVE = "chat.retrieve"
SPAN_SUGGESTIONS_LOOKUP = "suggestions.lookup"
SPAN_STREAM_RELAY = "stream.relay"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_CHAT_QUESTION_LEN = "chat.question_len"
ATTR_CHAT_TOP_K = "chat.top_k"
ATTR_CHAT_RESULT_COUNT = "chat.result_count"

ATTR_SUGGESTIONS_RECORD_ID = "suggestions.record_id"
ATTR_SUGGESTIONS_RECORD_COUNT = "suggestions.record_count"
ATTR_SUGGESTIONS_FALLBACK = "suggestions.fallback"

ATTR_STREAM_SERVICE = "stream.service"
ATTR_STREAM_CHUNKS = "stream.chunks"
ATTR_STREAM_STATUS = "stream.status"


def init_telemetry(app: FastAPI | None, settings: TracingConfig | None) -> bool:
    """Initialise the OTEL ``TracerProvider`` and auto-instrumentations.

    Must run before the application starts serving, since the FastAPI
    instrumentor installs ASGI middleware.  Returns whether tracing was
    enabled.
    """
    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return False

    if not settings.endpoint:
        logger.warning(
            "Tracing enabled but no endpoint configured; "
            "skipping OpenTelemetry setup."
        )
        return False

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create({"service.name": settings.service_name})
    sampler = ParentBased(root=TraceIdRatioBased(settings.sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    headers: dict[str, str] = {}
    if settings.username:
        credentials = f"{settings.username}:{settings.password}"
        encoded = base64.b64encode(credentials.encode()).decode()
        headers["Authorization"] = f"Basic {encoded}"

    exporter = OTLPSpanExporter(endpoint=settings.endpoint, headers=headers)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        excluded = ",".join(settings.excluded_urls)
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded)

    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    HTTPXClientInstrumentor().instrument()

    logger.info(
        "OpenTelemetry tracing initialised (service=%s).", settings.service_name
    )
    return True


def get_current_trace_id() -> str | None:
    """Return the active OTEL trace ID as a 32-char hex string, or ``None``."""
    ctx = trace.get_current_span().get_span_context()
    if ctx is None or not ctx.is_valid:
        return None
    return format_trace_id(ctx.trace_id)
