"""
Logging builder: create and apply a dictConfig logging configuration from Settings.

This module:
 - builds a dictConfig-compatible mapping from Settings (`make_dict_config`)
 - applies it (`setup_logging`), creating LOG_DIR first when logging to files.

Relevant settings:
 - LOG_LEVEL, LOG_FORMAT ("json" | "text"), ENV
 - LOG_TO_STDOUT / LOG_DIR: files are written only when LOG_TO_STDOUT is false
   and LOG_DIR is set; otherwise errors also go to an error console handler
 - ENABLE_SQL_LOGGING: lets `sqlalchemy.engine` statement logs through at DEBUG
"""

from pathlib import Path
import logging
import logging.config

from eschool_repository.config.settings import Settings
from eschool_repository.utils.logging import get_project_name

from .formatters import JsonFormatter, ColorFormatter
from .filters import CorrelationIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping using the provided settings.

    The returned mapping includes:
      - formatters: "standard" (colored when LOG_FORMAT is "text") and "json"
      - filters: "correlation_id", "redact"
      - handlers: console, plus file/error_file OR error_console depending on LOG_TO_STDOUT
      - loggers: root and sqlalchemy.engine
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(correlation_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(default="eschool-repository"),
        },
    }

    filters = {
        "correlation_id": {"()": CorrelationIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Initialize logging from settings.

    Steps:
      1. Ensure LOG_DIR exists when writing files.
      2. Apply dictConfig(make_dict_config(settings)).
      3. Register a CorrelationIdFilter on the root logger as well, so records
         reaching handlers added later (e.g. pytest's caplog) still carry the id.
    """
    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    logging.getLogger().addFilter(CorrelationIdFilter())
