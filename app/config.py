"""Application configuration."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Diff defaults (overridable per request)
    diff_strategy: Literal["optimal", "cheap"] = "optimal"
    diff_weight: Literal["encoded_length", "operation_count"] = "encoded_length"


settings = Settings()
