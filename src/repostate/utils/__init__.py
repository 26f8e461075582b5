"""Utilities shared by the repostate builders and readers."""

from repostate.utils._concurrency import gather_settled
from repostate.utils._logging import LogFormatType, create_logger, get_logger

__all__ = ["LogFormatType", "create_logger", "gather_settled", "get_logger"]
