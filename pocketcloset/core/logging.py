"""Logging configuration and per-request correlation ids."""

import logging
import os
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler

from pocketcloset.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(correlation_id)s | %(message)s"

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")


class CorrelationIdFilter(logging.Filter):
    """Stamp every record with the correlation id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        return True


def configure_logging() -> None:
    """Configure root logger: console always, rotating files when LOG_DIR is set."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    correlation = CorrelationIdFilter()
    formatter = logging.Formatter(LOG_FORMAT)

    handlers = [logging.StreamHandler()]
    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        app_log = RotatingFileHandler(
            os.path.join(settings.LOG_DIR, "app.log"), maxBytes=10 * 1024 * 1024, backupCount=10
        )
        app_log.setLevel(logging.INFO)
        error_log = RotatingFileHandler(
            os.path.join(settings.LOG_DIR, "error.log"), maxBytes=10 * 1024 * 1024, backupCount=10
        )
        error_log.setLevel(logging.ERROR)
        handlers.extend([app_log, error_log])

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(correlation)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # uvicorn access lines duplicate the request middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
