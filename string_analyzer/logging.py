"""Logging setup for the service: console output, request timing and slow SQL."""

import logging
import time
from logging.config import dictConfig
from typing import Any, Dict

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from starlette.middleware.base import BaseHTTPMiddleware

from string_analyzer.config import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] in %(module)s: %(message)s"

request_logger = logging.getLogger("string_analyzer.request")
db_logger = logging.getLogger("string_analyzer.db")


def _console_handler() -> Dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "formatter": "color" if settings.LOG_COLOR else "plain",
        "level": settings.CONSOLE_LOG_LEVEL.upper(),
    }


# Request and query loggers are children of "string_analyzer" and share its handler
LOGGING_CONFIG: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": LOG_FORMAT},
        "color": {
            "()": "colorlog.ColoredFormatter",
            "format": "%(log_color)s" + LOG_FORMAT,
            "log_colors": {
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        },
    },
    "handlers": {"console": _console_handler()},
    "loggers": {
        "uvicorn": {"level": "WARNING"},
        "uvicorn.access": {"level": "WARNING"},
        "sqlalchemy.engine": {"level": "WARNING"},
        "string_analyzer": {
            "level": settings.LOG_LEVEL.upper(),
            "handlers": ["console"],
            "propagate": False,
        },
    },
    "root": {"level": "WARNING", "handlers": ["console"]},
}


def init_logging() -> None:
    dictConfig(LOGGING_CONFIG)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and wall time of every request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        request_logger.info(
            "%s %s -> %s (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


def setup_query_logging(engine: Engine, threshold_ms: int = settings.SLOW_QUERY_THRESHOLD_MS) -> None:
    """Warn about statements slower than threshold_ms; log the rest at DEBUG."""

    @event.listens_for(engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):
        context._query_started = time.perf_counter()

    @event.listens_for(engine, "after_cursor_execute")
    def _log_duration(conn, cursor, statement, parameters, context, executemany):
        elapsed_ms = (time.perf_counter() - context._query_started) * 1000
        if elapsed_ms > threshold_ms:
            db_logger.warning("Slow query (%.2f ms > %d ms): %s", elapsed_ms, threshold_ms, statement)
        else:
            db_logger.debug("Query (%.2f ms): %s", elapsed_ms, statement)
