"""Configuration management using pydantic-settings."""

from typing import Optional
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
    port: int = Field(default=7788, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # OpenAI Assistants Configuration
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_base_url: Optional[str] = Field(default=None, description="OpenAI API base URL override")
    assistant_id: Optional[str] = Field(default=None, description="Assistant that answers every conversation")

    # Run Polling Configuration
    run_poll_interval_ms: int = Field(default=1000, gt=0, description="Spacing between run status checks")
    run_max_wait_ms: int = Field(default=120000, gt=0, description="Total budget before giving up on a run")

    # Storage Configuration
    database_path: str = Field(default="./data/threadchat.db", description="DuckDB database file")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[str] = Field(default="./logs/app.log", description="Log file path")

    def get_run_config(self) -> dict:
        """Get run executor options."""
        return {
            "poll_interval_ms": self.run_poll_interval_ms,
            "max_wait_ms": self.run_max_wait_ms,
        }


# Global settings instance
settings = Settings()
