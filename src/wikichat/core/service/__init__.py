"""Chat and suggestion services."""

from .deps import get_chat_service, get_suggestion_service
from .models import ChatMessage, SuggestionSource
from .rag import RagChatService
from .suggestions import SuggestionService

__all__ = [
    "ChatMessage",
    "get_chat_service",
    "get_suggestion_service",
    "RagChatService",
    "SuggestionService",
    "SuggestionSource",
]
