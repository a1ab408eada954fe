"""Plain-text token streaming.

Pipes an async generator of text chunks straight into a
``StreamingResponse``: chunks are forwarded as they are produced, never
collected first.  Failures are reported exactly once and re-raised:

* before the first chunk (retrieval, prompt rendering, opening the model
  stream) the handler itself raises, so the client gets a 500;
* after the first chunk the relay raises, which aborts the response.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import aclosing

from fastapi.responses import StreamingResponse

from wikichat.core.service.metrics import observe_stream
from wikichat.infra.errors import ErrorReporter, report_errors
from wikichat.infra.telemetry import (
    ATTR_STREAM_CHUNKS,
    ATTR_STREAM_SERVICE,
    ATTR_STREAM_STATUS,
    SPAN_STREAM_RELAY,
    get_current_trace_id,
    tracer,
)

logger = logging.getLogger(__name__)

STREAMING_RESPONSE_MEDIA_TYPE = "text/plain; charset=utf-8"
STREAMING_RESPONSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}
TRACE_HEADER = "X-WikiChat-Trace"

_NOT_STARTED = object()


async def _relay(
    first: object,
    rest: AsyncGenerator[str, None],
    reporter: ErrorReporter,
    service_name: str,
) -> AsyncGenerator[str, None]:
    with tracer.start_as_current_span(SPAN_STREAM_RELAY) as span:
        span.set_attribute(ATTR_STREAM_SERVICE, service_name)
        chunks = 0
        status = "ok"
        try:
            if first is _NOT_STARTED:
                logger.info("%s stream produced no output", service_name)
                return
            # closes the provider stream when the client disconnects
            async with aclosing(rest):
                chunks = 1
                yield first
                with report_errors(reporter):
                    async for chunk in rest:
                        chunks += 1
                        yield chunk
        except Exception:
            status = "error"
            logger.warning("%s stream aborted after %d chunks", service_name, chunks)
            raise
        finally:
            span.set_attribute(ATTR_STREAM_CHUNKS, chunks)
            span.set_attribute(ATTR_STREAM_STATUS, status)


async def stream_text_response(
    tokens: AsyncGenerator[str, None],
    reporter: ErrorReporter,
    *,
    service_name: str,
) -> StreamingResponse:
    """Start *tokens* and return them as a chunked ``text/plain`` response.

    Awaits only the first chunk before returning, so errors raised while
    the request is still being assembled become an HTTP 500.
    """
    with report_errors(reporter):
        first = await anext(tokens, _NOT_STARTED)

    headers = dict(STREAMING_RESPONSE_HEADERS)
    trace_id = get_current_trace_id()
    if trace_id:
        headers[TRACE_HEADER] = trace_id

    relay = observe_stream(service_name)(_relay)
    return StreamingResponse(
        relay(first, tokens, reporter, service_name),
        media_type=STREAMING_RESPONSE_MEDIA_TYPE,
        headers=headers,
    )
