"""End-to-end tests against a live WikiChat server."""

import httpx
import pytest

CHAT_TIMEOUT = 120


@pytest.mark.e2e
class TestWikiChatStreaming:
    """Exercise both handlers with real Astra and OpenAI backends."""

    @pytest.mark.asyncio
    async def test_chat_streams_plain_text(self, base_url: str):
        chunks: list[str] = []
        async with httpx.AsyncClient(timeout=CHAT_TIMEOUT) as client:
            async with client.stream(
                "POST",
                f"{base_url}/api/chat",
                json={
                    "messages": [
                        {"role": "user", "content": "What is photosynthesis?"}
                    ]
                },
            ) as response:
                assert response.status_code == 200
                assert response.headers["content-type"].startswith("text/plain")
                async for chunk in response.aiter_text():
                    chunks.append(chunk)

        answer = "".join(chunks)
        assert answer.strip()
        print(f"\nAnswer preview: {answer[:300]}")

    @pytest.mark.asyncio
    async def test_completion_streams_suggestions(self, base_url: str):
        async with httpx.AsyncClient(timeout=CHAT_TIMEOUT) as client:
            response = await client.post(f"{base_url}/api/completion", json={})

        assert response.status_code == 200
        assert response.text.strip()

    @pytest.mark.asyncio
    async def test_empty_conversation_rejected(self, base_url: str):
        async with httpx.AsyncClient(timeout=CHAT_TIMEOUT) as client:
            response = await client.post(f"{base_url}/api/chat", json={"messages": []})

        assert response.status_code == 422
