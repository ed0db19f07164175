"""
Application Configuration Module.

Manages application settings and environment variables using Pydantic for validation.
Provides centralized configuration management with type safety and validation.

Features:
- Environment variable and .env loading
- Secure credential management
- Comma-separated repository and label defaults
- Path normalization for the snapshot directory
"""

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import os
from logger import LogManager


class ConfigurationError(ValueError):
    """Raised when a run cannot start: missing credential, bad window, no repositories."""


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application configuration settings with validation.

    The GitHub token may be absent at load time; the entry point resolves it
    once and fails before any network call when it is missing.

    Attributes:
        app_name (str): Name of the application, also the logger name
        dev (bool): Human-readable log output
        log_dir (str): Directory for log files
        log_level (int): Logging level (default: info)
        github_token (Optional[SecretStr]): GitHub API token
        github_repo_names (str): Comma-separated default repositories
        report_labels (str): Comma-separated default label columns
        per_page (int): Page size requested from the GitHub API
        data_dir (str): Directory for data store snapshots
    """

    # Application settings
    app_name: str = Field(default="closed-report", description="Application name")
    dev: bool = Field(default=False, description="Development log formatting")
    log_dir: str = Field(default="logs", description="Logging directory")
    log_level: int = Field(default=20, description="Logging level, default info")

    # GitHub configuration
    github_token: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("github_token", "github_oauth_token"),
        description="GitHub token",
    )
    github_repo_names: str = Field(
        default="", description="Comma-separated owner/repo names to report on"
    )
    per_page: int = Field(default=50, description="GitHub API page size")

    # Report configuration
    report_labels: str = Field(
        default="", description="Comma-separated label names reported as columns"
    )

    data_dir: str = Field(default="data", description="Data store snapshot directory")

    @property
    def repository_names(self) -> List[str]:
        """
        Get list of repository names from configuration.

        Returns:
            List[str]: List of cleaned ``owner/repo`` names
        """
        return _split_csv(self.github_repo_names)

    @property
    def labels_to_report(self) -> List[str]:
        """
        Get list of label names reported as boolean columns.

        Returns:
            List[str]: Label names in configured order
        """
        return _split_csv(self.report_labels)

    @field_validator("data_dir")
    def ensure_absolute_path(cls, v: str) -> str:
        """
        Ensure the snapshot directory path is absolute.

        Args:
            v (str): Directory path to validate

        Returns:
            str: Absolute path to the snapshot directory
        """
        if not os.path.isabs(v):
            return os.path.abspath(v)
        return v

    # Configure env file loading
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )


# Create global settings instance
settings = Settings()

# Initialize logging configuration
logger = LogManager(
    app_name=settings.app_name.lower(),
    log_dir=settings.log_dir,
    development=settings.dev,
    level=settings.log_level,
).logger
