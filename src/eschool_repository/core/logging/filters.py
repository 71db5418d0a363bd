"""
Logging filters

Correlation ID filter and helpers, plus a filter that masks sensitive attributes.

A correlation id ties together the log lines produced by one logical unit of
work (a request handled by the calling service, a batch job, a test). The
persistence layer never invents one: the caller sets it with
`set_correlation_id()` and every record logged in the same context carries it.

How it is intended to be used
------------------------------
1. Install the filter into the logging configuration (dictConfig):

     "filters": {
         "correlation_id": {"()": CorrelationIdFilter},
     },
     "handlers": {
         "console": {"class": "logging.StreamHandler", "filters": ["correlation_id"], ...}
     }

2. Set the id at the start of the unit of work and reset it at the end:

     token = set_correlation_id("job-42")
     try:
         await repo.create(user)
     finally:
         reset_correlation_id(token)

Design notes
------------
- The id lives in a `contextvars.ContextVar`, so it follows asyncio tasks and
  survives `await` boundaries; concurrent tasks keep separate ids.
- Records get the sentinel "-" when no id is set, so format strings that
  reference `%(correlation_id)s` never fail.
- Both filters always return True: they annotate records, never drop them.
"""

import logging
from logging import LogRecord
import contextvars

_correlation_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(correlation_id: str | None):
    """
    Set the correlation id in the current context.

    Returns:
        token: contextvars.Token which can be passed to reset_correlation_id(token)
    """
    return _correlation_id_ctx.set(correlation_id)


def reset_correlation_id(token):
    """Restore the value that was current before the matching set_correlation_id()."""
    _correlation_id_ctx.reset(token)


def get_correlation_id() -> str | None:
    return _correlation_id_ctx.get()


class CorrelationIdFilter(logging.Filter):
    """
    Guarantees every LogRecord has a `correlation_id` attribute.

    Precedence:
      1. a value passed explicitly via `extra={"correlation_id": ...}`
      2. the context value set by set_correlation_id()
      3. the sentinel "-"
    """

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = (
            getattr(record, "correlation_id", None) or get_correlation_id() or "-"
        )
        return True


# Redact sensitive information
class RedactFilter(logging.Filter):
    """Masks record attributes (usually passed via `extra`) whose name is sensitive."""

    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "ssn", "authorization"}
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
