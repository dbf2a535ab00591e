"""Structured logging for conversion runs.

All records go through stdlib logging to stderr (and optionally a rotating
file) so that YAML or JSON printed on stdout is never interleaved with log
lines.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, List, Optional, Union

import structlog
from structlog.types import FilteringBoundLogger, Processor

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    json_logs: bool = False,
) -> FilteringBoundLogger:
    """Configure structlog on top of stdlib logging.

    Calling it again replaces the previous setup, which lets each CLI
    invocation pick its own level and destination.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of a rotating log file
        json_logs: Render records as JSON instead of key=value text

    Returns:
        Root structlog logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)
    if log_file:
        root_logger.addHandler(_rotating_file_handler(Path(log_file), numeric_level))

    structlog.configure(
        processors=_processors(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger()


def _processors(json_logs: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def _rotating_file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def get_logger(name: str, **initial_context: Any) -> FilteringBoundLogger:
    """Logger named after a module, with optional bound context."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def log_performance(
    logger: FilteringBoundLogger,
    operation: str,
    duration_ms: float,
    **context: Any
) -> None:
    """Record the duration of a load or conversion run."""
    logger.info(
        "Performance metric",
        operation=operation,
        duration_ms=duration_ms,
        metric_type="performance",
        **context
    )


def log_service_outcome(
    logger: FilteringBoundLogger,
    service_name: str,
    success: bool,
    **context: Any
) -> None:
    """Record the completion or failure of one service conversion.

    Args:
        logger: Structlog logger instance
        service_name: Name of the converted service
        success: Whether the YAML file was written
        **context: Output path, error message, duration
    """
    if success:
        logger.info(
            "File written successfully",
            service=service_name,
            metric_type="service_outcome",
            **context
        )
    else:
        logger.error(
            "Service conversion failed",
            service=service_name,
            metric_type="service_outcome",
            **context
        )
