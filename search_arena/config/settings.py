"""Application settings with Pydantic v2 patterns."""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROVIDER_NAMES = ("parallel", "firecrawl", "exa", "openai", "perplexity")

ENVIRONMENTS = ("development", "staging", "production", "test")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TRANSPORTS = ("streamable-http", "stdio")


def _one_of(label: str, value: str, allowed: tuple[str, ...]) -> str:
    if value not in allowed:
        raise ValueError(f"Invalid {label}: {value!r}. Expected one of {', '.join(allowed)}")
    return value


class ProviderSettings(BaseModel):
    """Provider configuration settings."""

    model_config = {"frozen": True}

    enabled: bool = Field(default=True, description="Whether provider is enabled")
    timeout: float = Field(default=60.0, gt=0, description="Request timeout in seconds")
    base_url: str | None = Field(
        default=None, description="Override for the provider endpoint URL"
    )
    model: str | None = Field(
        default=None, description="Model name, for providers backed by a language model"
    )


class JudgeSettings(BaseModel):
    """Language-model judge configuration."""

    model_config = {"frozen": True}

    model: str = Field(default="gpt-4o", description="Chat completion model")
    base_url: str = Field(
        default="https://api.openai.com/v1/chat/completions",
        description="Chat completions endpoint",
    )
    timeout: float = Field(default=120.0, gt=0, description="Request timeout in seconds")
    judge_temperature: float = Field(
        default=0.3, ge=0, le=2, description="Sampling temperature for judging"
    )
    judge_max_tokens: int = Field(default=1500, gt=0)
    generate_temperature: float = Field(
        default=0.8, ge=0, le=2, description="Sampling temperature for query generation"
    )
    generate_max_tokens: int = Field(default=1000, gt=0)
    results_per_provider: int = Field(
        default=5, ge=1, description="Results per provider shown to the judge"
    )


class AppSettings(BaseSettings):
    """Main application settings.

    Instances are frozen: settings are read once at startup and passed by
    reference to every component that needs them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        validate_default=True,
    )

    # Application metadata
    app_name: str = Field(default="Search Arena", description="Application name")
    environment: str = Field(default="development", description="Runtime environment")

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3001, ge=1, le=65535, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    transport: str = Field(default="streamable-http", description="Transport mode")
    results_dir: Path = Field(
        default=Path("results"), description="Directory for saved snapshots"
    )

    # Search defaults
    default_num_results: int = Field(default=10, ge=1, le=100)
    batch_num_results: int = Field(default=10, ge=1, le=100)

    # Provider credentials, using the provider's conventional variable names
    parallel_api_key: SecretStr = Field(default=SecretStr(""))
    firecrawl_api_key: SecretStr = Field(default=SecretStr(""))
    exa_api_key: SecretStr = Field(default=SecretStr(""))
    openai_api_key: SecretStr = Field(default=SecretStr(""))
    perplexity_api_key: SecretStr = Field(default=SecretStr(""))

    # Provider configurations
    parallel: ProviderSettings = Field(default_factory=ProviderSettings)
    firecrawl: ProviderSettings = Field(
        default_factory=lambda: ProviderSettings(timeout=30.0)
    )
    exa: ProviderSettings = Field(default_factory=ProviderSettings)
    openai: ProviderSettings = Field(
        default_factory=lambda: ProviderSettings(model="gpt-4o")
    )
    perplexity: ProviderSettings = Field(
        default_factory=lambda: ProviderSettings(enabled=False, model="sonar")
    )

    judge: JudgeSettings = Field(default_factory=JudgeSettings)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        return _one_of("environment", v.lower(), ENVIRONMENTS)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return _one_of("log level", v.upper(), LOG_LEVELS)

    @field_validator("transport")
    @classmethod
    def validate_transport(cls, v: str) -> str:
        return _one_of("transport", v, TRANSPORTS)

    def get_provider_config(self, provider_name: str) -> ProviderSettings | None:
        """Get configuration for a specific provider."""
        if provider_name.lower() not in PROVIDER_NAMES:
            return None
        return getattr(self, provider_name.lower())

    def get_api_key(self, provider_name: str) -> str:
        """Return the plain API key for a provider, or an empty string."""
        secret = getattr(self, f"{provider_name.lower()}_api_key", None)
        return secret.get_secret_value() if secret is not None else ""

    def get_enabled_providers(self) -> list[str]:
        """Get list of enabled provider names."""
        return [p for p in PROVIDER_NAMES if getattr(self, p).enabled]


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
