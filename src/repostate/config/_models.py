"""Settings models.

This module provides the Pydantic models describing the GitHub target
repository and logging settings.
"""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, SecretStr

DEFAULT_API_URL = "https://api.github.com"


class LogLevel(StrEnum):
    """Log level threshold."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format."""

    JSON = "json"
    TEXT = "text"


class GitHubSettings(BaseModel):
    """Target repository for remote fixtures.

    Attributes:
        token: Token granting read/write access to the repository.
        owner: Owner of the repository the fixtures are created in.
        repo: Name of the repository the fixtures are created in.
        api_url: Base URL of the REST API.
        timeout: Per-request timeout in seconds.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    token: SecretStr
    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    api_url: str = DEFAULT_API_URL
    timeout: float = Field(default=30.0, gt=0)


class LoggingSettings(BaseModel):
    """Logging settings.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.TEXT
    file: str = ""
