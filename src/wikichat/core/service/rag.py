"""RAG chat service.

Pipeline (sequential, one request):

    messages → (history transcript, question)
             → retrieve top-k documents for the question
             → render the chat prompt (context + history + question)
             → chat model → text chunks

The retriever and the chat model are LangChain runnables, so tests can
swap either for a ``RunnableLambda`` or a fake model.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncGenerator, Sequence
from operator import itemgetter

from langchain_core.documents import Document
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompt_values import PromptValue
from langchain_core.prompts import PromptTemplate
from langchain_core.runnables import Runnable, RunnableLambda

from wikichat.core.llm import ChatModelFactory
from wikichat.infra.telemetry import (
    ATTR_CHAT_QUESTION_LEN,
    ATTR_CHAT_RESULT_COUNT,
    ATTR_CHAT_TOP_K,
    SPAN_CHAT_RETRIEVE,
    tracer,
)

from .metrics import RETRIEVAL_LATENCY_SECONDS, RETRIEVED_DOCUMENTS
from .models import ROLE_ASSISTANT, ROLE_USER, ChatMessage

logger = logging.getLogger(__name__)

# Prompt slot names
KEY_CONTEXT = "context"
KEY_CHAT_HISTORY = "chat_history"
KEY_QUESTION = "question"

_ROLE_LABELS = {
    ROLE_USER: "Human",
    ROLE_ASSISTANT: "Assistant",
}


class EmptyConversation(ValueError):
    """Raised when a chat request carries no messages."""


def format_chat_history(history: Sequence[ChatMessage]) -> str:
    """Render prior turns as one ``Label: content`` line per message.

    ``user`` and ``assistant`` map to ``Human`` / ``Assistant``; any other
    role is used verbatim as its own label.
    """
    return "\n".join(
        f"{_ROLE_LABELS.get(message.role, message.role)}: {message.content}"
        for message in history
    )


def combine_documents(docs: Sequence[Document]) -> str:
    """Serialize retrieved documents into the prompt context blob."""
    serialized = [
        f"\nTitle: {doc.metadata.get('title')}"
        f"\nURL: {doc.metadata.get('url')}"
        f"\nContent: {doc.page_content}"
        for doc in docs
    ]
    return "\n\n".join(serialized)


def split_conversation(
    messages: Sequence[ChatMessage],
) -> tuple[list[ChatMessage], str]:
    """Return ``(history, question)``: all but the last message, and its text."""
    if not messages:
        raise EmptyConversation("Conversation must contain at least one message.")
    *history, latest = messages
    return history, latest.content


class RagChatService:
    """Retrieval-augmented chat over the primary vector store collection."""

    chat_service_name = "chat"

    def __init__(
        self,
        retriever: Runnable[str, list[Document]],
        chat_model_factory: ChatModelFactory,
        template: str,
        top_k: int | None = None,
    ) -> None:
        self._retriever = retriever
        self._chat_model_factory = chat_model_factory
        self._prompt = PromptTemplate.from_template(template)
        self._top_k = top_k
        self._assemble: Runnable[dict, PromptValue] = (
            {
                KEY_CONTEXT: itemgetter(KEY_QUESTION)
                | RunnableLambda(self._retrieve)
                | RunnableLambda(combine_documents),
                KEY_CHAT_HISTORY: itemgetter(KEY_CHAT_HISTORY),
                KEY_QUESTION: itemgetter(KEY_QUESTION),
            }
            | self._prompt
        )

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    async def _retrieve(self, question: str) -> list[Document]:
        with tracer.start_as_current_span(SPAN_CHAT_RETRIEVE) as span:
            span.set_attribute(ATTR_CHAT_QUESTION_LEN, len(question))
            if self._top_k is not None:
                span.set_attribute(ATTR_CHAT_TOP_K, self._top_k)

            start = time.monotonic()
            docs = await self._retriever.ainvoke(question)
            RETRIEVAL_LATENCY_SECONDS.observe(time.monotonic() - start)
            RETRIEVED_DOCUMENTS.observe(len(docs))
            span.set_attribute(ATTR_CHAT_RESULT_COUNT, len(docs))

        logger.info("Chat: retrieved %d documents", len(docs))
        return docs

    # ------------------------------------------------------------------
    # Prompt assembly
    # ------------------------------------------------------------------

    async def build_prompt(self, messages: Sequence[ChatMessage]) -> PromptValue:
        """Retrieve context and render the chat prompt for *messages*."""
        history, question = split_conversation(messages)
        logger.debug("Chat: assembling prompt with %d history turns", len(history))
        return await self._assemble.ainvoke(
            {
                KEY_QUESTION: question,
                KEY_CHAT_HISTORY: format_chat_history(history),
            }
        )

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------

    async def stream_response(
        self,
        messages: Sequence[ChatMessage],
        model_name: str | None = None,
    ) -> AsyncGenerator[str, None]:
        """Yield the model's answer as text chunks, as they are generated."""
        prompt = await self.build_prompt(messages)
        chain = self._chat_model_factory(model_name) | StrOutputParser()
        async for chunk in chain.astream(prompt):
            yield chunk
