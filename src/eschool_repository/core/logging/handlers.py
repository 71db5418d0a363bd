"""
Handler factories for logging.dictConfig.

Each helper takes the validated `Settings` and returns one handler configuration
dict; builder.py registers them under fixed names ("console", "file",
"error_file", "error_console"). They are pure functions, so tests can assert on
the returned dicts directly.

Every handler applies the "correlation_id" and "redact" filters defined by the
builder.
"""

from eschool_repository.config.settings import Settings
from pathlib import Path

DEFAULT_FILTERS = ["correlation_id", "redact"]


def _formatter_name(settings: Settings) -> str:
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def get_console_handler(settings: Settings) -> dict:
    """
    Stream handler on stdout at `LOG_LEVEL`.

    Returns:
        dict: A handler configuration dictionary compatible with dictConfig().
    """
    return {
        "class": "logging.StreamHandler",
        "stream": "ext://sys.stdout",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filters": list(DEFAULT_FILTERS),
    }


def get_file_handler(settings: Settings) -> dict:
    """Rotating `<LOG_DIR>/app.log` at `LOG_LEVEL`."""
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filename": str(Path(settings.LOG_DIR) / "app.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(DEFAULT_FILTERS),
    }


def get_error_file_handler(settings: Settings) -> dict:
    """Rotating `<LOG_DIR>/errors.log`, ERROR and above, always JSON."""
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "level": "ERROR",
        "filename": str(Path(settings.LOG_DIR) / "errors.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(DEFAULT_FILTERS),
    }


def get_error_console_handler(settings: Settings) -> dict:
    """Stream handler on stderr, ERROR and above, always JSON."""
    return {
        "class": "logging.StreamHandler",
        "stream": "ext://sys.stderr",
        "formatter": "json",
        "level": "ERROR",
        "filters": list(DEFAULT_FILTERS),
    }
