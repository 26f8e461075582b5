"""Logging utilities for repostate.

This module provides standalone structlog logger factories. Each logger is
self-contained and does not modify global structlog configuration, so the
harness never interferes with the logging setup of the test suite using it.
"""

import logging
import sys
from functools import cache
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal, cast, final

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


def _log_level_from_string(level: str | None, *, respect_env: bool = True) -> int:
    """Convert a log level string to a logging level integer.

    REPOSTATE_DEBUG forces DEBUG when respect_env is True. Without an explicit
    level, REPOSTATE_LOG_LEVEL is used, then WARNING.

    Args:
        level: Log level string (debug, info, warning, error) or None.
        respect_env: Whether environment variables may override the level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("REPOSTATE_DEBUG", None):
        return logging.DEBUG

    if level is None:
        level = getenv("REPOSTATE_LOG_LEVEL", "warning") if respect_env else "warning"

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.WARNING)


@cache
def _file_logger(log_file: str) -> structlog.WriteLogger:
    """Return the one raw logger appending to `log_file`."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return structlog.WriteLogger(file=log_path.open("a"))


def create_logger(
    name: str,
    *,
    level: str | None = None,
    log_format: LogFormatType = "text",
    log_file: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger.

    Args:
        name: Logger name, bound to every entry as ``logger``.
        level: Log level threshold (debug, info, warning, error). Defaults to
            REPOSTATE_LOG_LEVEL, then warning. REPOSTATE_DEBUG forces debug.
        log_format: Output format, either "json" or "text".
        log_file: File to append to. Logs go to stderr when empty.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = _log_level_from_string(level)

    if log_file:
        raw_logger = _file_logger(log_file)
    else:
        raw_logger = structlog.PrintLogger(file=sys.stderr)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )
    return logger.bind(logger=name)


def _configured_logger(name: str) -> "FilteringBoundLogger":  # noqa: UP037
    from repostate.config import LoggingSettings, load_logging_settings  # noqa: PLC0415
    from repostate.exceptions import ConfigError  # noqa: PLC0415

    config_error: str | None = None
    try:
        settings = load_logging_settings()
    except ConfigError as e:
        settings = LoggingSettings()
        config_error = str(e)

    logger = create_logger(
        name,
        level=settings.level.value,
        log_format=cast("LogFormatType", settings.format.value),
        log_file=settings.file,
    )
    if config_error is not None:
        logger.warning("invalid_logging_settings", error=config_error)
    return logger


@final
class _ModuleLogger:
    """Logger reading its settings from the environment on first use.

    Module loggers are created at import time, before tests or the CLI have
    set REPOSTATE_LOG_* variables.
    """

    __slots__ = ("_logger", "_name")

    def __init__(self, name: str) -> None:
        self._name = name
        self._logger: "FilteringBoundLogger | None" = None

    def __getattr__(self, attr: str) -> Any:  # noqa: ANN401
        if self._logger is None:
            self._logger = _configured_logger(self._name)
        return getattr(self._logger, attr)


@cache
def get_logger(name: str) -> "FilteringBoundLogger":  # noqa: UP037
    """Return the shared logger for a repostate module.

    Settings come from the environment (see `repostate.config`) when the
    logger is first used, not when it is created. Loggers are created once
    per name, and loggers writing to the same file share one handle.
    """
    return cast("FilteringBoundLogger", _ModuleLogger(name))
