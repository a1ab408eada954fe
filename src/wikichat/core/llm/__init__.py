"""LLM client objects as langchain models."""

from .deps import ChatModelFactory, get_chat_model_factory, get_completion_llm  # noqa: F401
