"""Logging setup for completion-mux applications.

The library itself only writes to stdlib loggers (logging.getLogger), which
stay silent until an application installs a handler. configure_logging()
installs one that renders every record, stdlib or structlog, through the
same structlog chain, driven by LoggingSettings.

Context bound with log_context() (for example the multiplexer a run is
draining) is merged into records from both sides, so settlement events
emitted by the library carry it without the library knowing about it.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

from completion_mux.core.config import LoggingSettings

# asyncio reports selector and slow-callback details at DEBUG
_NOISY_LOGGERS: tuple[str, ...] = ("asyncio",)


def _renderer(json_output: bool) -> list[Any]:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Route structlog and stdlib logging to stdout.

    Args:
        settings: Level and output format. Defaults to LoggingSettings().
    """
    settings = settings if settings is not None else LoggingSettings()
    log_level = getattr(logging, settings.level)

    # Applied to structlog events and, as foreign_pre_chain, to stdlib records
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach loggers created before it
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processors=[ProcessorFormatter.remove_processors_meta, *_renderer(settings.json_output)],
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    noisy_level = max(log_level, logging.WARNING)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Attach fields to every record logged inside the block.

    Example:
        with log_context(multiplexer="demo"):
            await mux.all()
    """
    with structlog.contextvars.bound_contextvars(**fields):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Bound structlog logger for application code (typically __name__)."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
