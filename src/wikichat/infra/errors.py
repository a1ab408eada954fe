"""Error reporting: Bugsnag when configured, a no-op otherwise.

Handlers never branch on whether reporting is enabled: they always talk to
an ``ErrorReporter`` and the lifespan decides which implementation lives on
``app.state``.  Reporting is best effort; a failing reporter is logged and
never replaces the exception being reported.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Iterator
from contextlib import contextmanager
from typing import Annotated, Protocol, runtime_checkable

import bugsnag
from fastapi import Depends, FastAPI, Request

from wikichat.configs.config import AppConfig, get_app_config
from wikichat.configs.system import ErrorReportingConfig
from wikichat.core.service.metrics import ERRORS_REPORTED_TOTAL
from wikichat.infra.lifespan import get_app

logger = logging.getLogger(__name__)


@runtime_checkable
class ErrorReporter(Protocol):
    """Anything that can forward an exception to an error tracker."""

    def notify(self, exc: BaseException) -> None: ...


class NullErrorReporter:
    """Reporter used when no error-tracking key is configured."""

    def notify(self, exc: BaseException) -> None:
        return None


class BugsnagErrorReporter:
    """Forwards exceptions to Bugsnag.

    The client is created with ``install_sys_hook=False`` so it only sees
    exceptions passed to ``notify``; delivery happens on Bugsnag's own
    background thread.
    """

    def __init__(self, config: ErrorReportingConfig) -> None:
        self._client = bugsnag.Client(
            api_key=config.api_key,
            release_stage=config.release_stage,
            install_sys_hook=False,
        )

    def notify(self, exc: BaseException) -> None:
        try:
            self._client.notify(exc)
        except Exception:
            logger.warning("Failed to report exception to Bugsnag", exc_info=True)
            return
        ERRORS_REPORTED_TOTAL.labels(exc_type=type(exc).__name__).inc()


def create_error_reporter(config: ErrorReportingConfig) -> ErrorReporter:
    if not config.enabled:
        logger.info("Error reporting disabled (no Bugsnag API key).")
        return NullErrorReporter()
    logger.info("Bugsnag error reporting enabled (stage=%s).", config.release_stage)
    return BugsnagErrorReporter(config)


@contextmanager
def report_errors(reporter: ErrorReporter) -> Iterator[None]:
    """Report any exception raised in the block, then re-raise it."""
    try:
        yield
    except Exception as exc:
        reporter.notify(exc)
        raise


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_error_reporter(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Attach the process-wide ``ErrorReporter`` to ``app.state``."""
    app.state.error_reporter = create_error_reporter(config.error_reporting)
    yield


# ---------------------------------------------------------------------------
# Per-request dependency (reads app.state)
# ---------------------------------------------------------------------------


def get_error_reporter(request: Request) -> ErrorReporter:
    """Return the ``ErrorReporter`` from ``app.state``."""
    return request.app.state.error_reporter
