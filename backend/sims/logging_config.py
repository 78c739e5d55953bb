"""
SIMS - Logging Setup

Two streams:

* application log: stdout (plus an optional rotating file), JSON lines in
  production or a one-line text form while developing
* audit log: shop-level events worth keeping (pricing settings changed, print
  queue reordered, product or filament deleted), one JSON object per line

Usage:
    from sims.logging_config import get_logger, audit_log

    logger = get_logger(__name__)
    logger.info("Queued print job", extra={"queue_item_id": 7, "position": 3})

    audit_log("PRINT_QUEUE_REORDERED", resource_type="print_queue", details={"order": [3, 1, 2]})
"""
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sims.core.settings import settings

AUDIT_LOGGER_NAME = "sims.audit"

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS
    }


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record. Fields passed through `extra` are added at
    the top level, e.g.

        {"timestamp": "...", "level": "INFO",
         "logger": "sims.services.filament_service",
         "message": "Filament 4 below minimum, added to purchase list",
         "filament_id": 4, "needed_quantity": 3}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": _utc_now(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno >= logging.ERROR:
            entry["source"] = f"{record.pathname}:{record.lineno} in {record.funcName}"
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in _extra_fields(record).items():
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            entry[key] = value

        return json.dumps(entry)


class TextFormatter(logging.Formatter):
    """`14:02:11 INFO sims.services.product_service: Created product 5 product_id=5`"""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{datetime.now():%H:%M:%S} {record.levelname} {record.name}: {record.getMessage()}"

        extras = " ".join(f"{key}={value}" for key, value in _extra_fields(record).items())
        if extras:
            line = f"{line} {extras}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class AuditFormatter(logging.Formatter):
    """Audit events as JSON; empty fields are left out."""

    FIELDS = ("event", "resource_type", "resource_id", "details", "ip_address")

    def format(self, record: logging.LogRecord) -> str:
        entry = {"timestamp": _utc_now()}
        for field in self.FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        entry.setdefault("event", record.getMessage())
        return json.dumps(entry, default=str)


def _rotating_file(path: str, max_bytes: int, backups: int, formatter: logging.Formatter) -> logging.Handler:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> None:
    """
    Install handlers on the root and audit loggers from sims.core.settings.

    Safe to call more than once; existing handlers are replaced.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    formatter = JSONFormatter() if settings.LOG_FORMAT == "json" else TextFormatter()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if settings.LOG_FILE:
        root.addHandler(_rotating_file(settings.LOG_FILE, 10 * 1024 * 1024, 5, formatter))

    setup_audit_logging()

    # SQL echo is controlled by SQL_ECHO, not the root level
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def setup_audit_logging() -> None:
    """Audit events go to AUDIT_LOG_FILE only (and stdout when DEBUG is on)."""
    audit = logging.getLogger(AUDIT_LOGGER_NAME)
    audit.setLevel(logging.INFO)
    audit.handlers.clear()
    audit.propagate = False

    if settings.AUDIT_LOG_FILE:
        audit.addHandler(_rotating_file(settings.AUDIT_LOG_FILE, 20 * 1024 * 1024, 10, AuditFormatter()))

    if settings.DEBUG:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(AuditFormatter())
        audit.addHandler(console)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def audit_log(
    event: str,
    *,
    resource_type: Optional[str] = None,
    resource_id: Optional[Any] = None,
    details: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> None:
    """
    Record a shop-level event.

    Args:
        event: SETTINGS_UPDATED, PRINT_QUEUE_REORDERED, PRODUCT_DELETED or FILAMENT_DELETED
        resource_type: "settings", "print_queue", "product", "filament"
        resource_id: id of the affected row, when there is one
        details: event payload, e.g. the changed settings or the new queue order
        ip_address: caller address, see get_client_ip
    """
    logging.getLogger(AUDIT_LOGGER_NAME).info(
        event,
        extra={
            "event": event,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "details": details or {},
            "ip_address": ip_address,
        },
    )


def get_client_ip(request) -> Optional[str]:
    """Caller address; the first X-Forwarded-For hop wins when behind a proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (request.client.host if request.client else None)
