"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="VYNTRA_",
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = True
    log_level: Literal["debug", "info", "warning", "error"] = "info"

    # Application settings
    app_name: str = "Vyntra Workflow Engine"
    app_version: str = "0.1.0"
    debug: bool = False

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Execution settings
    run_mode: Literal["simulate", "live"] = "simulate"
    db_save_table: str = "va_items"
    run_monthly_limit: int = 500

    # Persistence
    database_url: str | None = None
    max_run_records: int = 500

    # AI/LLM settings
    llm_model: str = "gpt-4.1-mini"
    llm_temperature: float = 0.2
    llm_timeout_seconds: float = 60.0
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    anthropic_api_key: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
