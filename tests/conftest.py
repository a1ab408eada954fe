"""Shared fixtures: the application wired to fake providers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from langchain_core.language_models.fake import FakeStreamingListLLM

from tests.fakes import (
    PHOTOSYNTHESIS_DOC,
    RECENT_ARTICLES_RECORD,
    FakeCollection,
    FakeRetriever,
    RecordingReporter,
    fake_chat_model,
)
from wikichat.core.llm import get_chat_model_factory, get_completion_llm
from wikichat.infra.astra import get_retriever, get_suggestions_collection
from wikichat.infra.errors import get_error_reporter


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def retriever() -> FakeRetriever:
    return FakeRetriever([PHOTOSYNTHESIS_DOC])


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection([RECENT_ARTICLES_RECORD])


@pytest.fixture
def app(
    reporter: RecordingReporter,
    retriever: FakeRetriever,
    collection: FakeCollection,
) -> FastAPI:
    """The real application with every provider swapped for a fake.

    Tests replace the ``get_chat_model_factory`` / ``get_completion_llm``
    overrides when they need a specific model behaviour.
    """
    from wikichat.app import app as wikichat_app

    overrides = wikichat_app.dependency_overrides
    overrides[get_error_reporter] = lambda: reporter
    overrides[get_retriever] = retriever.as_runnable
    overrides[get_suggestions_collection] = lambda: collection
    overrides[get_chat_model_factory] = lambda: (
        lambda model_name=None: fake_chat_model("Plants turn light into sugar.")
    )
    overrides[get_completion_llm] = lambda: FakeStreamingListLLM(
        responses=["What is new at the Eiffel Tower?"]
    )
    yield wikichat_app
    overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    # Not used as a context manager: the lifespan would build real clients.
    return TestClient(app, raise_server_exceptions=False)
