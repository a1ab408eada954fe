"""Structured logging bootstrap.

One stdout handler is shared by the root logger and uvicorn's loggers, so
request logs, handler logs and provider SDK warnings end up in the same
stream and format.  Production emits JSON lines tagged with ``service``;
local development uses uvicorn's coloured formatter.

Each record carries the OpenTelemetry ``trace_id`` / ``span_id`` of the
request that produced it (empty strings when tracing is off), matching the
``X-WikiChat-Trace`` response header.
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace

from wikichat.configs.system import LoggingConfig

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
_DEV_FORMAT = "%(levelprefix)s %(asctime)s %(name)s  %(message)s"
_DEV_DATEFMT = "%H:%M:%S"


class _TraceContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        valid = ctx is not None and ctx.is_valid
        record.trace_id = format(ctx.trace_id, "032x") if valid else ""  # type: ignore[attr-defined]
        record.span_id = format(ctx.span_id, "016x") if valid else ""  # type: ignore[attr-defined]
        return True


def _json_formatter(config: LoggingConfig) -> logging.Formatter:
    from pythonjsonlogger.json import JsonFormatter

    return JsonFormatter(
        fmt=_JSON_FORMAT,
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
        static_fields={"service": config.service_name},
        defaults={"trace_id": "", "span_id": ""},
    )


def _dev_formatter() -> logging.Formatter:
    from uvicorn.logging import DefaultFormatter

    return DefaultFormatter(fmt=_DEV_FORMAT, datefmt=_DEV_DATEFMT, use_colors=True)


def setup_logging(config: LoggingConfig | None = None) -> logging.Handler:
    """Route all application and server logging through one handler.

    Called once by ``get_app`` before the lifespan runs.  Returns the
    installed handler.
    """
    config = config or LoggingConfig()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_TraceContextFilter())
    handler.setFormatter(
        _json_formatter(config) if config.json_output else _dev_formatter()
    )

    root = logging.getLogger()
    root.setLevel(config.level.upper())
    root.handlers = [handler]

    # uvicorn installs its own handlers; replace them instead of propagating
    for name in _UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler
