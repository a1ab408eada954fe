"""Suggested-questions service.

Reads the precomputed ``recent_articles`` record from the suggestions
collection, serializes it to JSON and asks a completion model for sample
questions.  A failing lookup is logged and downgraded to an empty context:
the model can still produce generic suggestions, and the endpoint stays up
while the suggestions data is stale or missing.  Every other failure
propagates.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_core.runnables import Runnable

from wikichat.infra.telemetry import (
    ATTR_SUGGESTIONS_FALLBACK,
    ATTR_SUGGESTIONS_RECORD_COUNT,
    ATTR_SUGGESTIONS_RECORD_ID,
    SPAN_SUGGESTIONS_LOOKUP,
    tracer,
)

from .metrics import SUGGESTION_LOOKUPS_TOTAL
from .models import SuggestionSource

logger = logging.getLogger(__name__)

KEY_CONTEXT = "context"
KEY_RECENT_ARTICLES = "recent_articles"

SUGGESTIONS_PROJECTION = {
    "recent_articles.metadata.title": True,
    "recent_articles.suggested_chunks.content": True,
}


def record_to_source(record: dict[str, Any]) -> SuggestionSource:
    """Map a stored suggestions record to its title and chunk texts.

    Only the first entry of ``recent_articles`` is used.
    """
    article = record[KEY_RECENT_ARTICLES][0]
    return SuggestionSource(
        title=article["metadata"]["title"],
        content=[chunk["content"] for chunk in article["suggested_chunks"]],
    )


def serialize_sources(sources: list[SuggestionSource]) -> str:
    """JSON-encode *sources* compactly, the way the prompt expects them."""
    return json.dumps(
        [source.model_dump() for source in sources],
        separators=(",", ":"),
        ensure_ascii=False,
    )


class SuggestionService:
    """Streams suggested questions built from recently added articles."""

    chat_service_name = "suggestions"

    def __init__(
        self,
        collection: Any,
        llm: Runnable,
        template: str,
        record_id: str,
    ) -> None:
        self._collection = collection
        self._llm = llm
        self._prompt = PromptTemplate.from_template(template)
        self._record_id = record_id

    async def load_context(self) -> str:
        """Return the serialized suggestions context, or ``""`` on lookup failure."""
        with tracer.start_as_current_span(SPAN_SUGGESTIONS_LOOKUP) as span:
            span.set_attribute(ATTR_SUGGESTIONS_RECORD_ID, self._record_id)
            try:
                cursor = self._collection.find(
                    {"_id": self._record_id},
                    projection=SUGGESTIONS_PROJECTION,
                )
                sources = [record_to_source(record) async for record in cursor]
            except Exception:
                SUGGESTION_LOOKUPS_TOTAL.labels(result="error").inc()
                span.set_attribute(ATTR_SUGGESTIONS_FALLBACK, True)
                logger.warning(
                    "Error querying suggestions collection; "
                    "continuing with empty context",
                    exc_info=True,
                )
                return ""

            SUGGESTION_LOOKUPS_TOTAL.labels(
                result="found" if sources else "empty"
            ).inc()
            span.set_attribute(ATTR_SUGGESTIONS_RECORD_COUNT, len(sources))
            return serialize_sources(sources)

    async def stream_response(self) -> AsyncGenerator[str, None]:
        """Yield suggested questions as text chunks, as they are generated."""
        context = await self.load_context()
        chain = self._prompt | self._llm | StrOutputParser()
        async for chunk in chain.astream({KEY_CONTEXT: context}):
            yield chunk
