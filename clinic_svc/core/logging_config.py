"""
Logging setup for Clinic Service API.

Every record passes through RequestIdFilter, which stamps it with the id of
the HTTP request being served (set by core.middleware.LoggingMiddleware), so
both output formats can show it:

    json: {"timestamp": "...Z", "level": "INFO", "logger": "services.exam_service",
           "message": "Exam created successfully (id=3)", "request_id": "1f2e3d4c",
           "extra": {"exam_name": "Glicemia"}}
    text: 2024-01-15 10:30:00 | INFO     | 1f2e3d4c | services.exam_service | Exam created ...
"""
import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.datetime_utils import format_iso

# Top-level packages/modules of this service that create loggers
APP_LOGGERS = ("main", "api", "core", "repositories", "services")

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s"

NO_REQUEST = "-"

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def clear_request_id() -> None:
    request_id_var.set(None)


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or "-") to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or NO_REQUEST
        return True


# Attribute names of a bare LogRecord; anything else was passed via extra={...}
_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}


class JSONFormatter(logging.Formatter):
    """Single-line JSON formatter, timestamps in UTC."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": format_iso(datetime.fromtimestamp(record.created, tz=timezone.utc)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", NO_REQUEST)
        if request_id != NO_REQUEST:
            entry["request_id"] = request_id

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Send all logs to stdout through one handler.

    Called once from the application lifespan with the values from
    core.config.settings (LOG_LEVEL, LOG_FORMAT). The service's own loggers
    get ``level``; uvicorn's loggers drop their handlers and propagate to
    root so server and application lines share the format.
    """
    level = level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(level)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"level": level, "format": "json" if json_format else "text"}
    )
