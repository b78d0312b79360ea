"""Logging configuration for the Storefront domain.

``storefront.domain`` calls ``configure_logging()`` on import, so every
module logging through structlog shares one processor chain. ``Decimal``
amounts passed as log fields are written as plain strings (``"16.99"``)
in both the console and JSON renderers.
"""

import logging
import logging.handlers
import os
import sys
from decimal import Decimal
from pathlib import Path

import structlog

DEFAULT_LOG_FILE_PREFIX = "storefront"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

_LEVELS_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_STRUCTURED_ENVIRONMENTS = ("production", "staging")

_QUIET_LOGGERS = ("protean", "asyncio")


def get_environment() -> str:
    """Name of the running environment, lower-cased."""
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level(environment: str | None = None) -> str:
    """``LOG_LEVEL`` if set, otherwise the level for the environment."""
    environment = environment or get_environment()
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENVIRONMENT.get(environment, "INFO")).upper()


def _rotating_file_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(level: str, log_dir: str | Path | None = None, log_file_prefix: str = DEFAULT_LOG_FILE_PREFIX):
    """Route stdlib logging to stdout, and to rotating files under ``log_dir``.

    Two files are written when a directory is given: ``<prefix>.log`` with
    every record at ``level`` or above, and ``<prefix>_error.log`` with
    errors only.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_file_handler(log_path / f"{log_file_prefix}.log", level))
        root_logger.addHandler(_rotating_file_handler(log_path / f"{log_file_prefix}_error.log", logging.ERROR))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def stringify_amounts(_logger, _method_name, event_dict):
    """Render ``Decimal`` values as their plain string form."""
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
    return event_dict


def setup_structlog(environment: str) -> None:
    """Configure the structlog processor chain for the environment."""
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        stringify_amounts,
    ]

    if environment in _STRUCTURED_ENVIRONMENTS:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(
                    show_locals=True,
                    max_frames=2,
                ),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(
    level: str | None = None,
    log_dir: str | Path | None = None,
    log_file_prefix: str = DEFAULT_LOG_FILE_PREFIX,
    environment: str | None = None,
) -> None:
    """Configure stdlib logging and structlog.

    Anything not passed is read from the environment: the environment name
    from ``ENV``/``ENVIRONMENT``/``PROTEAN_ENV``, the level from
    ``LOG_LEVEL``, and the log directory from ``LOG_DIR``. Without a log
    directory, logs only go to stdout.
    """
    environment = (environment or get_environment()).lower()
    level = (level or get_log_level(environment)).upper()
    log_dir = log_dir or os.getenv("LOG_DIR")

    setup_stdlib_logging(level, log_dir=log_dir, log_file_prefix=log_file_prefix)
    setup_structlog(environment)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)

