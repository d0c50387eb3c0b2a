"""
Logging Configuration for Inventory Profitability Analytics

structlog renders every record, including those from stdlib loggers
(uvicorn, SQLAlchemy, urllib3), through one stdout handler on the root
logger. Request and session ids bound by the API middleware are merged
into each event.
"""

import logging
import sys
from typing import Dict, List, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import add_log_level, ProcessorFormatter

from inventory_analytics.config.settings import get_settings

HANDLER_NAME = "inventory_analytics"

# Library loggers that flood INFO during imports and report loads
QUIET_LOGGERS: Dict[str, int] = {
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "urllib3": logging.WARNING,
}

UVICORN_LOGGERS = ["uvicorn", "uvicorn.error", "uvicorn.access"]


def shared_processors() -> List:
    """Processors applied to structlog events and foreign stdlib records alike"""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def build_renderer(log_format: str):
    """JSON lines for ``json``, coloured console output for anything else"""
    if log_format == "json":
        return JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def _install_handler(handler: logging.Handler, level: int) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        if existing.get_name() == HANDLER_NAME:
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> logging.Handler:
    """
    Configure structured logging for the application.

    Safe to call more than once: the handler installed by a previous call
    is replaced, handlers installed by others (e.g. pytest) are kept.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        log_format: Override log format (json or text)

    Returns:
        The root handler now rendering all records
    """
    settings = get_settings()
    level = (log_level or settings.monitoring.log_level).upper()
    fmt = log_format or settings.monitoring.log_format
    numeric_level = getattr(logging, level, logging.INFO)

    processors = shared_processors()
    structlog.configure(
        processors=processors + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setLevel(numeric_level)
    handler.setFormatter(ProcessorFormatter(processor=build_renderer(fmt), foreign_pre_chain=processors))
    _install_handler(handler, numeric_level)

    # uvicorn installs its own handlers; route its records through ours
    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True
        uvicorn_logger.setLevel(numeric_level)

    for name, quiet_level in QUIET_LOGGERS.items():
        if name == "sqlalchemy.engine" and settings.database.echo:
            continue
        logging.getLogger(name).setLevel(max(quiet_level, numeric_level))

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level,
        format=fmt,
        environment=settings.app_env,
    )
    return handler


def get_logger(name: str):
    """Get a logger instance with the given name."""
    return structlog.get_logger(name)
