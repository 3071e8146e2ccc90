r"""
Structured logging setup.

Modules log key/value events through structlog; the CLI calls
``configure_logging`` once before a sweep starts.

    from write_bench.log import configure_logging, get_logger

    configure_logging("INFO", format="console")
    logger = get_logger(__name__)
    logger.info("sweep_started", profile="default")
"""

import logging
import sys
from typing import Literal

import structlog

__all__ = ["LOG_LEVELS", "configure_logging", "get_logger"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str = "INFO", format: Literal["json", "console"] = "console") -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for machine-readable lines, "console" for humans.

    Raises:
        ValueError: If level is not one of LOG_LEVELS.
    """
    if level.upper() not in LOG_LEVELS:
        msg = f"Unknown log level '{level}'. Available: {', '.join(LOG_LEVELS)}"
        raise ValueError(msg)

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Reports go to stdout, so logs go to stderr
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level.upper(),
        force=True,
    )
    logging.getLogger("neo4j").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, usually named after the calling module."""
    return structlog.get_logger(name)
