"""FastAPI dependency factories for the chat and suggestion services.

Both services are cheap per-request wrappers around the process-wide
clients on ``app.state`` (vector store, suggestions collection), with an
explicit ``Depends`` chain so tests can override any link.
"""

from typing import Annotated, Any

from fastapi import Depends
from langchain_core.language_models import BaseLLM
from langchain_core.retrievers import BaseRetriever

from wikichat.configs.config import AppConfig, get_app_config
from wikichat.core.llm import (
    ChatModelFactory,
    get_chat_model_factory,
    get_completion_llm,
)
from wikichat.infra.astra import get_retriever, get_suggestions_collection

from .rag import RagChatService
from .suggestions import SuggestionService


def get_chat_service(
    retriever: Annotated[BaseRetriever, Depends(get_retriever)],
    chat_model_factory: Annotated[ChatModelFactory, Depends(get_chat_model_factory)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> RagChatService:
    return RagChatService(
        retriever=retriever,
        chat_model_factory=chat_model_factory,
        template=config.prompt.chat_template,
        top_k=config.chat.top_k,
    )


def get_suggestion_service(
    collection: Annotated[Any, Depends(get_suggestions_collection)],
    llm: Annotated[BaseLLM, Depends(get_completion_llm)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> SuggestionService:
    return SuggestionService(
        collection=collection,
        llm=llm,
        template=config.prompt.suggestions_template,
        record_id=config.suggestions.record_id,
    )
