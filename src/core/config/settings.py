# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the adaptive
practice API. Settings are loaded from environment variables with sensible
defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.practice.questions_per_session)
    40
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """PostgreSQL configuration for the practice database.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "practice"
    password: SecretStr = SecretStr("practice_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "adaptive_practice"
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class LLMSettings(BaseSettings):
    """LLM provider configuration using LiteLLM.

    Used only for on-demand question generation when the question bank
    is exhausted for a learner.

    Attributes:
        default_provider: Default LLM provider to use.
        ollama_base_url: Base URL for Ollama server.
        ollama_default_model: Default Ollama model.
        openai_api_key: OpenAI API key.
        openai_default_model: Default OpenAI model.
        anthropic_api_key: Anthropic API key.
        anthropic_default_model: Default Anthropic model.
        request_timeout: Request timeout in seconds.
        max_retries: Retry attempts handed to LiteLLM.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    default_provider: Literal["ollama", "openai", "anthropic"] = "openai"

    ollama_base_url: str = Field(
        default="http://localhost:11434",
        validation_alias="OLLAMA_BASE_URL",
    )
    ollama_default_model: str = Field(
        default="qwen2.5:7b",
        validation_alias="OLLAMA_DEFAULT_MODEL",
    )

    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
    )
    openai_default_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="OPENAI_DEFAULT_MODEL",
    )

    anthropic_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="ANTHROPIC_API_KEY",
    )
    anthropic_default_model: str = Field(
        default="claude-3-5-sonnet-20241022",
        validation_alias="ANTHROPIC_DEFAULT_MODEL",
    )

    request_timeout: float = 60.0
    max_retries: int = 2

    def get_default_model(self) -> str:
        """Get the default model for the configured provider.

        Returns:
            Model identifier string in LiteLLM format.
        """
        models = {
            "ollama": f"ollama/{self.ollama_default_model}",
            "openai": self.openai_default_model,
            "anthropic": self.anthropic_default_model,
        }
        return models[self.default_provider]

    def get_provider_params(self) -> dict[str, str]:
        """Get api_base / api_key to pass directly to LiteLLM.

        Returns:
            Dictionary with the provider's connection parameters.
        """
        params: dict[str, str] = {}
        if self.default_provider == "ollama":
            params["api_base"] = self.ollama_base_url
        elif self.default_provider == "openai" and self.openai_api_key:
            params["api_key"] = self.openai_api_key.get_secret_value()
        elif self.default_provider == "anthropic" and self.anthropic_api_key:
            params["api_key"] = self.anthropic_api_key.get_secret_value()
        return params


class PracticeSettings(BaseSettings):
    """Practice session configuration.

    Attributes:
        questions_per_session: Target number of answered questions per session.
        goal_accuracy: Accuracy (percent) at which a session goal is achieved.
        generated_question_type: Question type requested on demand.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRACTICE_",
        extra="ignore",
    )

    questions_per_session: int = Field(default=40, ge=1)
    goal_accuracy: int = Field(default=80, ge=0, le=100)
    generated_question_type: str = "MULTIPLE_CHOICE"


class AdaptiveSettings(BaseSettings):
    """Adaptive difficulty configuration.

    Attributes:
        promote_after: Consecutive correct answers that move a learner up a tier.
        demote_after: Consecutive wrong answers that move a learner down a tier.
        weak_topic_accuracy: Topic accuracy (percent) below which a topic is weak.
        strong_topic_accuracy: Topic accuracy (percent) at or above which a topic is strong.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADAPTIVE_",
        extra="ignore",
    )

    promote_after: int = Field(default=3, ge=1)
    demote_after: int = Field(default=3, ge=1)
    weak_topic_accuracy: int = 60
    strong_topic_accuracy: int = 80


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
        reload: Whether to enable auto-reload.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 5000
    workers: int = 2
    reload: bool = False


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        seed_curriculum: Seed the default units on startup when none exist.
        db: Database settings.
        llm: LLM provider settings.
        practice: Practice session settings.
        adaptive: Adaptive difficulty settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"
    seed_curriculum: bool = True

    # Subsettings - loaded with their own env prefixes
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    practice: PracticeSettings = Field(default_factory=PracticeSettings)
    adaptive: AdaptiveSettings = Field(default_factory=AdaptiveSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
