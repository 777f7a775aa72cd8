"""Core infrastructure: logging and configuration."""

from completion_mux.core.config import (
    DemoSettings,
    LoggingSettings,
    MuxSettings,
    load_settings,
)
from completion_mux.core.logging import configure_logging, get_logger, log_context

__all__ = [
    "DemoSettings",
    "LoggingSettings",
    "MuxSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
    "log_context",
]
