"""Fake providers shared by the unit and API tests."""

from collections.abc import AsyncIterator
from typing import Any

from langchain_core.documents import Document
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda


PHOTOSYNTHESIS_DOC = Document(
    page_content="Photosynthesis is a process used by plants to convert light energy.",
    metadata={
        "title": "Photosynthesis",
        "url": "https://en.wikipedia.org/wiki/Photosynthesis",
    },
)

RECENT_ARTICLES_RECORD = {
    "_id": "recent_articles",
    "recent_articles": [
        {
            "metadata": {"title": "Eiffel Tower"},
            "suggested_chunks": [
                {"content": "The tower was repainted in 2024."},
                {"content": "It hosted the Olympic rings."},
            ],
        }
    ],
}


class RecordingReporter:
    """ErrorReporter that remembers what it was given."""

    def __init__(self) -> None:
        self.reported: list[BaseException] = []

    def notify(self, exc: BaseException) -> None:
        self.reported.append(exc)


class FakeRetriever:
    """Builds a retriever runnable that records every query."""

    def __init__(self, docs: list[Document]) -> None:
        self.docs = docs
        self.queries: list[str] = []

    def _search(self, query: str) -> list[Document]:
        self.queries.append(query)
        return list(self.docs)

    def as_runnable(self) -> RunnableLambda:
        return RunnableLambda(self._search)


class FakeCursor:
    def __init__(self, records: list[dict[str, Any]]) -> None:
        self._records = list(records)

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        for record in self._records:
            yield record


class FakeCollection:
    """Stands in for an astrapy async collection."""

    def __init__(
        self,
        records: list[dict[str, Any]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.records = records or []
        self.error = error
        self.calls: list[tuple[dict, dict | None]] = []

    def find(self, filter: dict, projection: dict | None = None) -> FakeCursor:
        self.calls.append((filter, projection))
        if self.error is not None:
            raise self.error
        return FakeCursor([r for r in self.records if r.get("_id") == filter["_id"]])


class PromptRecorder:
    """A model stand-in that records rendered prompts and returns *reply*."""

    def __init__(self, reply: str = "ok") -> None:
        self.reply = reply
        self.prompts: list[str] = []

    def _call(self, prompt: Any) -> str:
        self.prompts.append(prompt.to_string())
        return self.reply

    def as_runnable(self) -> RunnableLambda:
        return RunnableLambda(self._call)


def failing_model(exc: Exception) -> RunnableLambda:
    def _raise(_prompt: Any) -> str:
        raise exc

    return RunnableLambda(_raise)


def fake_chat_model(reply: str) -> GenericFakeChatModel:
    return GenericFakeChatModel(messages=iter([AIMessage(content=reply)]))

