"""FastAPI application entry point.

Run with ``uvicorn wikichat.app:app``.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI

from wikichat.api.chat import router as chat_router
from wikichat.api.completion import router as completion_router
from wikichat.api.health import router as health_router
from wikichat.configs.config import AppConfig, get_app_config
from wikichat.core.service.metrics import instrument_metrics
from wikichat.infra.astra import build_suggestions_collection, build_vector_store
from wikichat.infra.errors import build_error_reporter
from wikichat.infra.lifespan import inject
from wikichat.infra.logging import setup_logging
from wikichat.infra.telemetry import init_telemetry

logger = logging.getLogger(__name__)


@inject
async def lifespan(
    app: FastAPI,
    _reporter: Annotated[None, Depends(build_error_reporter)],
    _vector_store: Annotated[None, Depends(build_vector_store)],
    _suggestions: Annotated[None, Depends(build_suggestions_collection)],
) -> AsyncGenerator[None, None]:
    """Provider clients are built by the ``build_*`` dependencies above."""
    logger.info("WikiChat started")
    yield
    logger.info("WikiChat shutting down")


def get_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        config = get_app_config()

    setup_logging(config.logging)

    app = FastAPI(
        title="WikiChat",
        description="Retrieval-augmented chat over the most popular Wikipedia pages",
        version="0.1.0",
        lifespan=lifespan,
    )

    init_telemetry(app, config.tracing)
    instrument_metrics(app, config.tracing)

    app.include_router(chat_router)
    app.include_router(completion_router)
    app.include_router(health_router)

    return app


app = get_app()
