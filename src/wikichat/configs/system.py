from pydantic import BaseModel, Field


class AstraConfig(BaseModel):
    """Astra DB connection and collection settings."""

    token: str = Field(default="", description="Astra DB application token")
    api_endpoint: str = Field(default="", description="Astra DB Data API endpoint")
    collection: str = Field(
        default="chat", description="Primary collection holding page chunks"
    )
    suggestions_collection: str = Field(
        default="chat_suggestions",
        description="Collection holding the precomputed recent-articles record",
    )
    content_field: str = Field(
        default="content",
        description="Document field that stores the chunk text",
    )


class EmbeddingConfig(BaseModel):
    """Cohere embedding settings used by the vector store."""

    api_key: str | None = Field(default=None, description="Cohere API key")
    model_name: str = Field(
        default="embed-english-v3.0", description="Cohere embedding model"
    )


class LLMConfig(BaseModel):
    """OpenAI client settings shared by chat and completion models."""

    api_key: str | None = Field(
        default=None,
        description="OpenAI API key; falls back to OPENAI_API_KEY when unset",
    )
    base_url: str | None = Field(
        default=None, description="OpenAI-compatible endpoint override"
    )
    timeout: float | None = Field(
        default=None, description="Per-request timeout in seconds"
    )


class ChatConfig(BaseModel):
    """Configuration for the /api/chat handler."""

    default_model: str = Field(
        default="gpt-4", description="Chat model used when the request omits `llm`"
    )
    temperature: float = Field(
        default=0.5, description="Sampling temperature for chat responses"
    )
    top_k: int = Field(
        default=10, ge=1, description="Number of documents retrieved per question"
    )


class SuggestionsConfig(BaseModel):
    """Configuration for the /api/completion handler."""

    model_name: str = Field(
        default="gpt-3.5-turbo-instruct",
        description="Completion model generating suggested questions",
    )
    temperature: float = Field(
        default=1.5, description="Sampling temperature for suggestions"
    )
    record_id: str = Field(
        default="recent_articles",
        description="Document id of the precomputed suggestions record",
    )


class ErrorReportingConfig(BaseModel):
    """Bugsnag settings; reporting is disabled when ``api_key`` is empty."""

    api_key: str | None = Field(default=None, description="Bugsnag API key")
    release_stage: str = Field(
        default="production", description="Bugsnag release stage"
    )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


class LoggingConfig(BaseModel):
    """Root logger settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of coloured text"
    )
    service_name: str = Field(
        default="wikichat", description="Value of the ``service`` field on JSON lines"
    )
    quiet_loggers: list[str] = Field(
        default_factory=lambda: [
            "httpx",
            "httpcore",
            "openai",
            "astrapy",
            "bugsnag",
            "opentelemetry",
        ],
        description="Provider SDK loggers capped at WARNING",
    )


class TracingConfig(BaseModel):
    """OpenTelemetry tracing settings."""

    enabled: bool = Field(default=False, description="Enable OTLP span export")
    endpoint: str = Field(default="", description="OTLP HTTP traces endpoint")
    username: str = Field(default="", description="Basic-auth user for the collector")
    password: str = Field(
        default="", description="Basic-auth password for the collector"
    )
    service_name: str = Field(default="wikichat", description="OTEL service.name")
    sample_rate: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Root span sampling ratio"
    )
    excluded_urls: list[str] = Field(
        default_factory=lambda: ["/health", "/metrics"],
        description="Paths that are neither traced nor counted in HTTP metrics",
    )
