"""Tests for the interactive CLI and its API client."""

import io
import json

import httpx
import pytest

from cli.client import APIError, ChatAPIClient
from cli.config import CLIConfig
from cli.wikichat_cli import WikiChatCLI


class _Server:
    """httpx mock transport handler that records requests."""

    def __init__(self, status_code: int = 200, text: str = "Hello there"):
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


def _client(server: _Server, config: CLIConfig | None = None) -> ChatAPIClient:
    return ChatAPIClient(config or CLIConfig(), transport=httpx.MockTransport(server))


class TestCLIConfig:
    def test_urls(self):
        config = CLIConfig(host="example.org", port=9000)
        assert config.chat_url == "http://example.org:9000/api/chat"
        assert config.completion_url == "http://example.org:9000/api/completion"


class TestChatAPIClient:
    @pytest.mark.asyncio
    async def test_chat_posts_messages_and_streams_text(self):
        server = _Server(text="Paris is the capital.")
        client = _client(server)
        messages = [{"role": "user", "content": "Capital of France?"}]

        chunks = [chunk async for chunk in client.chat(messages)]
        await client.close()

        assert "".join(chunks) == "Paris is the capital."
        assert server.requests[0].url.path == "/api/chat"
        assert server.payloads() == [{"messages": messages}]

    @pytest.mark.asyncio
    async def test_chat_sends_llm_when_configured(self):
        server = _Server()
        client = _client(server, CLIConfig(llm="gpt-4o"))

        async for _ in client.chat([{"role": "user", "content": "Hi"}]):
            pass
        await client.close()

        assert server.payloads()[0]["llm"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_suggestions_uses_completion_endpoint(self):
        server = _Server(text="Who was Ada Lovelace?")
        client = _client(server)

        chunks = [chunk async for chunk in client.suggestions()]
        await client.close()

        assert "".join(chunks) == "Who was Ada Lovelace?"
        assert server.requests[0].url.path == "/api/completion"

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        client = _client(_Server(status_code=500, text="Internal Server Error"))

        with pytest.raises(APIError) as exc_info:
            async for _ in client.chat([{"role": "user", "content": "Hi"}]):
                pass
        await client.close()

        assert exc_info.value.status_code == 500


class TestWikiChatCLI:
    @pytest.mark.asyncio
    async def test_keeps_conversation_between_questions(self):
        server = _Server(text="An answer.")
        output = io.StringIO()
        cli = WikiChatCLI(
            CLIConfig(),
            input_stream=io.StringIO("First?\nSecond?\nexit\n"),
            output_stream=output,
            client=_client(server),
        )

        await cli.run()

        second = server.payloads()[1]["messages"]
        assert [m["role"] for m in second] == ["user", "assistant", "user"]
        assert second[1]["content"] == "An answer."
        assert second[2]["content"] == "Second?"
        assert "Goodbye!" in output.getvalue()

    @pytest.mark.asyncio
    async def test_reset_clears_conversation(self):
        server = _Server()
        cli = WikiChatCLI(
            CLIConfig(),
            input_stream=io.StringIO("First?\n/reset\nSecond?\n"),
            output_stream=io.StringIO(),
            client=_client(server),
        )

        await cli.run()

        assert server.payloads()[1]["messages"] == [
            {"role": "user", "content": "Second?"}
        ]

    @pytest.mark.asyncio
    async def test_failed_question_is_dropped_from_history(self):
        output = io.StringIO()
        cli = WikiChatCLI(
            CLIConfig(),
            input_stream=io.StringIO("Question?\n"),
            output_stream=output,
            client=_client(_Server(status_code=500, text="boom")),
        )

        await cli.run()

        assert cli.messages == []
        assert "HTTP 500" in output.getvalue()

    @pytest.mark.asyncio
    async def test_suggest_command(self):
        server = _Server(text="What is quantum computing?")
        output = io.StringIO()
        cli = WikiChatCLI(
            CLIConfig(),
            input_stream=io.StringIO("/suggest\n"),
            output_stream=output,
            client=_client(server),
        )

        await cli.run()

        assert server.requests[0].url.path == "/api/completion"
        assert "What is quantum computing?" in output.getvalue()
        assert cli.messages == []

    @pytest.mark.asyncio
    async def test_suggest_once(self):
        server = _Server(text="Why is the sky blue?")
        output = io.StringIO()
        cli = WikiChatCLI(
            CLIConfig(),
            input_stream=io.StringIO(""),
            output_stream=output,
            client=_client(server),
        )

        await cli.suggest_once()

        assert len(server.requests) == 1
        assert output.getvalue().startswith("Why is the sky blue?")
