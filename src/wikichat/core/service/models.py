"""Domain models for the chat service layer."""

from typing import Literal

from pydantic import BaseModel, Field

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_SYSTEM = "system"

Role = Literal["user", "assistant", "system"]


class ChatMessage(BaseModel):
    """A single message in the conversation."""

    role: Role = Field(description="Message sender role")
    content: str = Field(description="Message content")


class SuggestionSource(BaseModel):
    """One recent article as presented to the suggestions prompt."""

    title: str = Field(description="Wikipedia page title")
    content: list[str] = Field(
        default_factory=list, description="Suggested chunk texts from the page"
    )
