"""Tests for the OpenAI model factories."""

from unittest.mock import patch

from wikichat.configs.config import AppConfig
from wikichat.configs.system import LLMConfig
from wikichat.core.llm import get_chat_model_factory, get_completion_llm


def _config() -> AppConfig:
    return AppConfig(llm=LLMConfig(api_key="sk-test"))


class TestChatModelFactory:
    def test_default_model_and_temperature(self):
        model = get_chat_model_factory(_config())(None)

        assert model.model_name == "gpt-4"
        assert model.temperature == 0.5
        assert model.streaming is True

    def test_requested_model_overrides_default(self):
        model = get_chat_model_factory(_config())("gpt-4o-mini")
        assert model.model_name == "gpt-4o-mini"

    def test_empty_model_name_is_passed_through(self):
        with patch("wikichat.core.llm.deps.ChatOpenAI") as chat_openai:
            get_chat_model_factory(_config())("")

        assert chat_openai.call_args.kwargs["model"] == ""


class TestCompletionLLM:
    def test_suggestion_model_settings(self):
        llm = get_completion_llm(_config())

        assert llm.model_name == "gpt-3.5-turbo-instruct"
        assert llm.temperature == 1.5
        assert llm.streaming is True
