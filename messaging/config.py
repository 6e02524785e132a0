"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=7790, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Database Configuration
    database_path: str = Field(default="./data/messaging.db", description="DuckDB database file")

    # Messaging Configuration
    message_page_size: int = Field(default=30, ge=1, description="Messages per page")
    pagination_lookahead: bool = Field(
        default=True,
        description="Fetch one extra row to detect the last page instead of relying on page length"
    )
    conversation_stale_seconds: float = Field(
        default=10.0, ge=0, description="How long a cached conversation list stays fresh"
    )
    preview_length: int = Field(default=200, ge=1, description="Max length of last_message_preview")
    profile_search_limit: int = Field(default=10, ge=1, description="Max profile search results")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: str = Field(default="./logs/app.log", description="Log file path")


# Global settings instance
settings = Settings()
