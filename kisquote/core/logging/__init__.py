"""Logging utilities for monitoring and debugging."""

from kisquote.core.logging.config import LogConfig
from kisquote.core.logging.logger import (
    bind,
    configure_logging,
    current_trace_id,
    get_logger,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "bind",
    "current_trace_id",
    "get_logger",
    "configure_logging",
    "log_context",
    "logger",
]
