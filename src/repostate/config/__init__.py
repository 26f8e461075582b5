"""repostate settings.

Settings are read from environment variables prefixed with REPOSTATE_:

    REPOSTATE_GITHUB_TOKEN, REPOSTATE_GITHUB_OWNER, REPOSTATE_GITHUB_REPO,
    REPOSTATE_GITHUB_API_URL, REPOSTATE_GITHUB_TIMEOUT,
    REPOSTATE_LOG_LEVEL, REPOSTATE_LOG_FORMAT, REPOSTATE_LOG_FILE
"""

from ._load import (
    ENV_PREFIX,
    load_github_settings,
    load_logging_settings,
    parse_env_vars,
    safe_load_github_settings,
)
from ._models import (
    DEFAULT_API_URL,
    GitHubSettings,
    LogFormat,
    LoggingSettings,
    LogLevel,
)

__all__ = [
    "DEFAULT_API_URL",
    "ENV_PREFIX",
    "GitHubSettings",
    "LogFormat",
    "LogLevel",
    "LoggingSettings",
    "load_github_settings",
    "load_logging_settings",
    "parse_env_vars",
    "safe_load_github_settings",
]
