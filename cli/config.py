"""Configuration management for the CLI tool."""

from pydantic import BaseModel, Field


class CLIConfig(BaseModel):
    """CLI configuration settings."""

    host: str = Field(
        default="localhost",
        description="Server host",
    )
    port: int = Field(
        default=8080,
        description="Server port",
    )
    chat_path: str = Field(
        default="/api/chat",
        description="API path for the chat endpoint",
    )
    completion_path: str = Field(
        default="/api/completion",
        description="API path for the suggested-questions endpoint",
    )
    llm: str | None = Field(
        default=None,
        description="Chat model to request; the server default when unset",
    )

    @property
    def base_url(self) -> str:
        """Get the base URL for the API."""
        return f"http://{self.host}:{self.port}"

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}{self.chat_path}"

    @property
    def completion_url(self) -> str:
        return f"{self.base_url}{self.completion_path}"
