"""Configuration management using pydantic-settings.

**Not a singleton**: each call to ``get_app_config()`` re-reads config
from disk so that edits to the YAML files are picked up without a restart.

Priority order (highest first):

1. Environment variables (``WIKICHAT_`` prefix, ``__`` nesting)
2. ``.env`` dotenv file
3. Static YAML (``configs/config.yaml``)
4. Prompt YAML (``configs/prompt.yml``)
5. Init defaults / field defaults
6. File secrets
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .prompt import PromptConfig
from .system import (
    AstraConfig,
    ChatConfig,
    EmbeddingConfig,
    ErrorReportingConfig,
    LLMConfig,
    LoggingConfig,
    SuggestionsConfig,
    TracingConfig,
)

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"
PROMPT_CONFIG_FILE = CONFIG_DIR / "prompt.yml"

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"
ENV_PREFIX = "WIKICHAT_"

DEFAULT_ENCODING = "utf-8"

_PROMPT_KEYS = ("chat_template", "suggestions_template")


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    astra: AstraConfig = Field(
        default_factory=AstraConfig,
        description="Astra DB vector store and suggestions collection",
    )

    embedding: EmbeddingConfig = Field(
        default_factory=EmbeddingConfig,
        description="Cohere embedding settings",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="OpenAI client settings",
    )

    chat: ChatConfig = Field(
        default_factory=ChatConfig, description="Chat handler settings"
    )

    suggestions: SuggestionsConfig = Field(
        default_factory=SuggestionsConfig,
        description="Suggestion handler settings",
    )

    error_reporting: ErrorReportingConfig = Field(
        default_factory=ErrorReportingConfig,
        description="Bugsnag error reporting",
    )

    prompt: PromptConfig = Field(
        default_factory=PromptConfig,
        description="Prompt templates",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging bootstrap settings",
    )

    tracing: TracingConfig = Field(
        default_factory=TracingConfig,
        description="OpenTelemetry tracing settings",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            _PromptYamlSettingsSource(settings_cls),
            init_settings,
            file_secret_settings,
        )


class _PromptYamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads template overrides from prompt.yml."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        # Unused: __call__ builds the whole mapping at once.
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        if not PROMPT_CONFIG_FILE.exists():
            return {}

        with open(PROMPT_CONFIG_FILE, encoding=DEFAULT_ENCODING) as f:
            data = yaml.safe_load(f) or {}

        prompt = {key: data[key] for key in _PROMPT_KEYS if key in data}
        return {"prompt": prompt} if prompt else {}


def get_app_config() -> AppConfig:
    """Get the application configuration.

    Re-reads the YAML files on every call.
    """
    return AppConfig()


def get_chat_config() -> ChatConfig:
    return get_app_config().chat
