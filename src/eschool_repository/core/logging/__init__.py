# eschool_repository/core/logging/
# ├─ __init__.py            # public API: setup_logging, set_correlation_id
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # CorrelationIdFilter, RedactFilter (+ contextvar helpers)
# └─ handlers.py            # handler config factories (console, files)


from .builder import setup_logging, make_dict_config
from .filters import (
    set_correlation_id,
    reset_correlation_id,
    get_correlation_id,
    CorrelationIdFilter,
    RedactFilter,
)

__all__ = [
    "setup_logging",
    "make_dict_config",
    "set_correlation_id",
    "reset_correlation_id",
    "get_correlation_id",
    "CorrelationIdFilter",
    "RedactFilter",
]
