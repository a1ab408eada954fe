"""API client for the WikiChat API with chunked text stream reading."""

import logging
from typing import AsyncIterator

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Raised when the server answers with a non-200 status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class ChatAPIClient:
    """Client for interacting with the WikiChat API."""

    def __init__(self, config: CLIConfig, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize the API client."""
        self.config = config
        self.client = httpx.AsyncClient(timeout=300.0, transport=transport)

    async def chat(self, messages: list[dict[str, str]]) -> AsyncIterator[str]:
        """Send the conversation and stream the answer text.

        Yields
        ------
        str
            Text chunks in the order the server produced them.
        """
        payload: dict = {"messages": messages}
        if self.config.llm:
            payload["llm"] = self.config.llm

        logger.debug(f"Making request to {self.config.chat_url} with payload: {payload}")
        async for chunk in self._stream(self.config.chat_url, payload):
            yield chunk

    async def suggestions(self) -> AsyncIterator[str]:
        """Stream suggested questions from the completion endpoint."""
        async for chunk in self._stream(self.config.completion_url, {}):
            yield chunk

    async def _stream(self, url: str, payload: dict) -> AsyncIterator[str]:
        async with self.client.stream(
            "POST", url, json=payload, headers={"Accept": "text/plain"}
        ) as response:
            logger.debug(f"Response status: {response.status_code}")
            logger.debug(f"Response headers: {dict(response.headers)}")

            if response.status_code != 200:
                error_text = await response.aread()
                raise APIError(response.status_code, error_text.decode())

            trace_id = response.headers.get("X-WikiChat-Trace")
            if trace_id:
                logger.debug(f"X-WikiChat-Trace: {trace_id}")

            async for chunk in response.aiter_text():
                if chunk:
                    yield chunk

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
