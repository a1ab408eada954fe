"""Prometheus metrics for the WikiChat application.

Custom business metrics that complement the auto-instrumented HTTP
metrics provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``wikichat_`` prefix.
"""

import asyncio
import functools
import logging
import time
from collections.abc import AsyncGenerator, Callable
from contextlib import aclosing
from typing import Any

from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from wikichat.configs.system import TracingConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Stream session metrics
# ---------------------------------------------------------------------------

STREAM_SESSIONS_ACTIVE = Gauge(
    "wikichat_stream_sessions_active",
    "Number of token streams currently being relayed",
    ["service"],
)

STREAM_SESSIONS_TOTAL = Counter(
    "wikichat_stream_sessions_total",
    "Total number of token streams, by outcome",
    ["service", "status"],  # "ok" | "error" | "cancelled"
)

STREAM_SESSION_DURATION_SECONDS = Histogram(
    "wikichat_stream_session_duration_seconds",
    "Duration of a relayed token stream",
    ["service"],
    buckets=(0.5, 1, 2, 5, 10, 30, 60, 120, 300),
)

STREAM_CHUNKS_TOTAL = Counter(
    "wikichat_stream_chunks_total",
    "Total text chunks relayed to clients",
    ["service"],
)

# ---------------------------------------------------------------------------
# Retrieval metrics
# ---------------------------------------------------------------------------

RETRIEVAL_LATENCY_SECONDS = Histogram(
    "wikichat_retrieval_latency_seconds",
    "Vector store similarity search latency (embed + search)",
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10),
)

RETRIEVED_DOCUMENTS = Histogram(
    "wikichat_retrieved_documents",
    "Number of documents returned per similarity search",
    buckets=(0, 1, 2, 3, 5, 10, 20),
)

SUGGESTION_LOOKUPS_TOTAL = Counter(
    "wikichat_suggestion_lookups_total",
    "Suggestions record lookups by outcome",
    ["result"],  # "found" | "empty" | "error"
)

# ---------------------------------------------------------------------------
# Error reporting
# ---------------------------------------------------------------------------

ERRORS_REPORTED_TOTAL = Counter(
    "wikichat_errors_reported_total",
    "Exceptions forwarded to the error tracker",
    ["exc_type"],
)


# ---------------------------------------------------------------------------
# Decorator
# ---------------------------------------------------------------------------


def observe_stream(
    service: str,
) -> Callable[[Callable[..., AsyncGenerator]], Callable[..., AsyncGenerator]]:
    """Decorator for an async generator of text chunks.

    Tracks the active-stream gauge, the outcome counter
    (ok / error / cancelled), duration, and relayed chunk count, all
    labelled with *service*.
    """

    def decorator(fn: Callable[..., AsyncGenerator]) -> Callable[..., AsyncGenerator]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> AsyncGenerator:
            STREAM_SESSIONS_ACTIVE.labels(service=service).inc()
            start = time.monotonic()
            status = "ok"
            try:
                async with aclosing(fn(*args, **kwargs)) as chunks:
                    async for chunk in chunks:
                        STREAM_CHUNKS_TOTAL.labels(service=service).inc()
                        yield chunk
            except (asyncio.CancelledError, GeneratorExit):
                # client went away; aclosing() has already shut the inner stream
                status = "cancelled"
                raise
            except Exception:
                status = "error"
                raise
            finally:
                STREAM_SESSIONS_ACTIVE.labels(service=service).dec()
                STREAM_SESSIONS_TOTAL.labels(service=service, status=status).inc()
                STREAM_SESSION_DURATION_SECONDS.labels(service=service).observe(
                    time.monotonic() - start
                )

        return wrapper

    return decorator


# ---------------------------------------------------------------------------
# App wiring
# ---------------------------------------------------------------------------


def instrument_metrics(app: FastAPI, config: TracingConfig) -> None:
    """Attach HTTP instrumentation middleware and the ``/metrics`` endpoint.

    Called while the app is being built; middleware cannot be added once
    the application has started.
    """
    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=config.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics")

    logger.info("Prometheus metrics initialised")
