import os
from collections.abc import Mapping

from pydantic import BaseModel, ValidationError

from repostate.exceptions import ConfigError

from ._models import GitHubSettings, LoggingSettings

ENV_PREFIX = "REPOSTATE_"


def parse_env_vars(
    section: str,
    env: Mapping[str, str] | None = None,
    prefix: str = ENV_PREFIX,
) -> dict[str, str]:
    """Collect the environment variables of one settings section.

    Args:
        section: Section name, e.g. "github".
        env: Environment mapping (defaults to os.environ).
        prefix: Environment variable prefix.

    Returns:
        Field name to raw value, e.g. REPOSTATE_GITHUB_OWNER -> {"owner": ...}.
    """
    source = os.environ if env is None else env
    section_prefix = f"{prefix}{section.upper()}_"
    result: dict[str, str] = {}
    for key, value in source.items():
        if not key.startswith(section_prefix):
            continue
        field_name = key[len(section_prefix) :].lower()
        if field_name:
            result[field_name] = value
    return result


def _env_name(section: str, field: str) -> str:
    return f"{ENV_PREFIX}{section.upper()}_{field.upper()}"


def _validate[T: BaseModel](model: type[T], section: str, data: dict[str, str]) -> T:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        keys = sorted(
            {_env_name(section, str(err["loc"][0])) for err in e.errors() if err["loc"]}
        )
        msg = f"Invalid or missing settings: {', '.join(keys)}"
        raise ConfigError(msg, keys=keys) from e


def load_github_settings(env: Mapping[str, str] | None = None) -> GitHubSettings:
    """Load GitHub settings from REPOSTATE_GITHUB_* variables.

    Args:
        env: Environment mapping (defaults to os.environ).

    Returns:
        Validated GitHubSettings.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid.
    """
    return _validate(GitHubSettings, "github", parse_env_vars("github", env))


def load_logging_settings(env: Mapping[str, str] | None = None) -> LoggingSettings:
    """Load logging settings from REPOSTATE_LOG_* variables.

    Args:
        env: Environment mapping (defaults to os.environ).

    Returns:
        Validated LoggingSettings.

    Raises:
        ConfigError: If a value is invalid.
    """
    data = parse_env_vars("log", env)
    # Values are case-insensitive
    if "level" in data:
        data["level"] = data["level"].lower()
    if "format" in data:
        data["format"] = data["format"].lower()
    return _validate(LoggingSettings, "log", data)


def safe_load_github_settings(
    env: Mapping[str, str] | None = None,
) -> tuple[GitHubSettings | None, str | None]:
    """Load GitHub settings without raising.

    Returns:
        Tuple of (settings, error_message). Exactly one of them is None.
    """
    try:
        return load_github_settings(env), None
    except ConfigError as e:
        return None, str(e)
