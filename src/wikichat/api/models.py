"""Pydantic models for the HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field

from wikichat.core.service.models import ChatMessage


class ChatRequest(BaseModel):
    """Request body for ``POST /api/chat``."""

    messages: list[ChatMessage] = Field(
        min_length=1,
        description="Conversation so far; the last message is the question",
    )
    llm: str | None = Field(
        default=None,
        description="Chat model identifier; the configured default when omitted",
    )


class HealthResponse(BaseModel):
    """Liveness probe payload."""

    status: Literal["ok"] = "ok"
