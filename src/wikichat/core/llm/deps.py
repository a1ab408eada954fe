"""LLM factory functions (FastAPI dependencies)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends
from langchain_core.language_models import BaseChatModel, BaseLLM
from langchain_openai import ChatOpenAI, OpenAI

from wikichat.configs.config import AppConfig, get_app_config

ChatModelFactory = Callable[[str | None], BaseChatModel]


def get_chat_model_factory(
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> ChatModelFactory:
    """Return a factory building a streaming ``ChatOpenAI`` per model name.

    The model is chosen per request (``llm`` in the body), so the client is
    constructed lazily.  Only ``None`` selects ``chat.default_model``; any
    other value, the empty string included, is passed through unchanged.
    """

    def factory(model_name: str | None = None) -> BaseChatModel:
        return ChatOpenAI(
            model=model_name if model_name is not None else config.chat.default_model,
            temperature=config.chat.temperature,
            api_key=config.llm.api_key,
            base_url=config.llm.base_url,
            timeout=config.llm.timeout,
            streaming=True,
        )

    return factory


def get_completion_llm(
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> BaseLLM:
    """Create the streaming completion-style model used for suggestions."""
    return OpenAI(
        model=config.suggestions.model_name,
        temperature=config.suggestions.temperature,
        api_key=config.llm.api_key,
        base_url=config.llm.base_url,
        timeout=config.llm.timeout,
        streaming=True,
    )
