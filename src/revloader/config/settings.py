"""
Pydantic settings model for the revision loader.

This module defines the configuration schema using pydantic-settings for
validation and environment variable overrides.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="REVLOADER_LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format (text or json)")
    file_path: str | None = Field(default=None, description="Log file path")
    backup_count: int = Field(default=7, description="Number of daily files to keep")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = ["text", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}")
        return v.lower()


class LoaderSettings(BaseSettings):
    """Main loader settings."""

    model_config = SettingsConfigDict(
        env_prefix="REVLOADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    repo_path: str = Field(default="", description="Working directory to load")
    show_all: bool = Field(default=True, description="Load every ref instead of the current branch")
    default_branch: str = Field(default="master", description="Branch used for ahead/behind counts")
    remote_name: str = Field(default="origin", description="Remote used for ahead/behind counts")
    git_binary: str = Field(default="git", description="Git executable")
    command_timeout: int = Field(default=30, description="Timeout in seconds for synchronous commands")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("command_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Command timeout must be positive")
        return v

    @field_validator("default_branch", "remote_name")
    @classmethod
    def validate_ref_component(cls, v: str) -> str:
        v = v.strip()
        if not v or " " in v:
            raise ValueError("Branch and remote names must be non-empty and contain no spaces")
        return v
