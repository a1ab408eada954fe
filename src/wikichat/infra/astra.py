"""Astra DB clients (leaf module).

``build_vector_store`` and ``build_suggestions_collection`` are lifespan
dependencies: they create the process-wide clients once and attach them to
``app.state``.  Per-request dependencies read from ``app.state``.

Embeddings are produced by Cohere inside ``AstraDBVectorStore``; nothing in
the application calls the embedding provider directly.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Annotated, Any

from astrapy import DataAPIClient
from fastapi import Depends, FastAPI, Request
from langchain_astradb import AstraDBVectorStore
from langchain_astradb.utils.astradb import SetupMode
from langchain_cohere import CohereEmbeddings
from langchain_core.retrievers import BaseRetriever

from wikichat.configs.config import AppConfig, get_app_config, get_chat_config
from wikichat.configs.system import AstraConfig, ChatConfig, EmbeddingConfig
from wikichat.infra.lifespan import get_app

logger = logging.getLogger(__name__)


def create_vector_store(
    astra: AstraConfig, embedding: EmbeddingConfig
) -> AstraDBVectorStore:
    """Open the primary collection without touching the network.

    The collection is created and filled by the ingest job, so setup is
    off: the constructor neither embeds a sample sentence to learn the
    vector dimension nor creates or checks the collection.  Provider
    failures therefore surface on the first request, inside its error
    reporting scope, instead of at process start.
    """
    embeddings = CohereEmbeddings(
        model=embedding.model_name,
        cohere_api_key=embedding.api_key,
    )
    return AstraDBVectorStore(
        collection_name=astra.collection,
        embedding=embeddings,
        api_endpoint=astra.api_endpoint,
        token=astra.token,
        content_field=astra.content_field,
        setup_mode=SetupMode.OFF,
    )


def create_suggestions_collection(astra: AstraConfig) -> Any:
    """Return an async astrapy collection handle for the suggestions data."""
    database = DataAPIClient(astra.token).get_database(astra.api_endpoint)
    return database.get_collection(astra.suggestions_collection).to_async()


# ---------------------------------------------------------------------------
# Lifespan dependencies
# ---------------------------------------------------------------------------


async def build_vector_store(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the primary ``AstraDBVectorStore``, attach to ``app.state``."""
    app.state.vector_store = create_vector_store(config.astra, config.embedding)
    logger.info(
        "Vector store ready (collection=%s, embeddings=%s)",
        config.astra.collection,
        config.embedding.model_name,
    )
    yield


async def build_suggestions_collection(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the suggestions collection handle, attach to ``app.state``."""
    app.state.suggestions_collection = create_suggestions_collection(config.astra)
    logger.info(
        "Suggestions collection ready (collection=%s)",
        config.astra.suggestions_collection,
    )
    yield


# ---------------------------------------------------------------------------
# Per-request dependencies (read app.state)
# ---------------------------------------------------------------------------


def get_retriever(
    request: Request,
    config: Annotated[ChatConfig, Depends(get_chat_config)],
) -> BaseRetriever:
    """Return a top-k retriever over the primary collection."""
    store: AstraDBVectorStore = request.app.state.vector_store
    return store.as_retriever(search_kwargs={"k": config.top_k})


def get_suggestions_collection(request: Request) -> Any:
    """Return the suggestions collection from ``app.state``."""
    return request.app.state.suggestions_collection
