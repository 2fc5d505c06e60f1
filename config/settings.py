"""
Configuration management for give-me-hours.

This module provides centralized configuration with:
- Environment and .env overrides (nested with "__")
- Type validation and lenient defaults for CLI-facing values
- Logging configuration
- Git log retrieval settings
"""

from typing import Dict, Any
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import BaseSettings as PydanticBaseSettings

DEFAULT_DURATION = "1h"
DEFAULT_WORD_LIMIT = 200
DEFAULT_SUMMARY_SENTENCES = 3


class HoursSettings(BaseSettings):
    """Working-time estimation and summary settings."""

    model_config = {"env_prefix": "HOURS_"}

    duration: str = Field(default=DEFAULT_DURATION, description="Gap threshold (e.g. 1h, 30m)")
    word_limit: int = Field(default=DEFAULT_WORD_LIMIT, description="Maximum words in a summary")
    padding_before: float = Field(
        default=0.0, description="Hours credited before the first commit of each session"
    )
    hours_rounding: float = Field(
        default=0.0, description="Round the total up to this many hours (0 disables)"
    )
    summary_sentences: int = Field(
        default=DEFAULT_SUMMARY_SENTENCES, description="Messages extracted by ranking"
    )

    @field_validator("word_limit", mode="before")
    @classmethod
    def validate_word_limit(cls, v):
        try:
            value = int(v)
        except (TypeError, ValueError):
            return DEFAULT_WORD_LIMIT
        return value if value > 0 else DEFAULT_WORD_LIMIT

    @field_validator("padding_before", "hours_rounding")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Value must be zero or positive")
        return v

    @field_validator("summary_sentences")
    @classmethod
    def validate_summary_sentences(cls, v):
        if v < 1:
            raise ValueError("At least one summary sentence is required")
        return v


class GitSettings(BaseSettings):
    """Git log retrieval settings."""

    model_config = {"env_prefix": "GIT_"}

    repo_path: str = Field(default=".", description="Path to the Git repository")
    log_format: str = Field(
        default="%ai|%an|%s", description="Pretty format passed to git log"
    )

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v.count("|") < 2:
            raise ValueError("Log format must produce timestamp|author|message")
        return v


class MonitoringSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = {"env_prefix": "MONITORING_"}

    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(default="text", description="Log format")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class Settings(PydanticBaseSettings):
    """
    Main application settings.

    Values come from (highest priority first) explicit constructor
    arguments, environment variables such as ``HOURS__DURATION=30m``,
    the ``.env`` file, then the defaults below.
    """

    app_name: str = Field(default="give-me-hours", description="Application name")
    version: str = Field(default="1.0.1", description="Application version")
    debug: bool = Field(default=False, description="Enable debug trace output")

    hours: HoursSettings = Field(default_factory=HoursSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "extra": "ignore"
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Example:
        >>> settings = get_settings()
        >>> print(settings.hours.duration)
    """
    return Settings()


# Global settings instance
settings = get_settings()


def export_config() -> Dict[str, Any]:
    """Export configuration for display in debug mode."""
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "debug": settings.debug,
        "hours": {
            "duration": settings.hours.duration,
            "word_limit": settings.hours.word_limit,
            "padding_before": settings.hours.padding_before,
            "hours_rounding": settings.hours.hours_rounding,
            "summary_sentences": settings.hours.summary_sentences,
        },
        "git": {
            "repo_path": settings.git.repo_path,
            "log_format": settings.git.log_format,
        },
        "monitoring": {
            "log_level": settings.monitoring.log_level,
        },
    }


if __name__ == "__main__":
    import json

    print(json.dumps(export_config(), indent=2))
