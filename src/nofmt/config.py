"""Configuration management for nofmt."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_FORMATTER = "gofmt %f"


class Settings(BaseSettings):
    """Application configuration via environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Formatter command; %f is replaced by the file path
    formatter: str = Field(
        default=DEFAULT_FORMATTER,
        alias="NOFMT_FORMATTER",
    )

    # Diff program for -d; None renders diffs in-process
    diff_program: Optional[str] = Field(
        default=None,
        alias="NOFMT_DIFF_PROGRAM",
    )

    # Processing settings
    jobs: int = Field(
        default=4,
        ge=1,
        alias="NOFMT_JOBS",
    )
    queue_size: int = Field(
        default=16,
        ge=1,
        alias="NOFMT_QUEUE_SIZE",
    )
    source_suffix: str = Field(
        default=".go",
        alias="NOFMT_SUFFIX",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        alias="NOFMT_MAX_RETRIES",
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if needed."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load settings from an optional specific .env file."""
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
