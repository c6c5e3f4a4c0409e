"""
Structured JSON logging configuration for the maternal health tracker.

This module provides:
- JSON-formatted single-line log output
- Patient ID propagation via contextvars
- Consistent log structure across store, services and controller

Log Structure (JSON):
{
    "timestamp": "2024-01-15T10:30:00.000Z",
    "level": "INFO",
    "logger": "maternal_svc.repositories.record_store",
    "message": "Record appended",
    "patient_id": "p-123",
    "extra": { ... }
}

Usage:
    from maternal_svc.core.logging_config import setup_logging, patient_context

    # At startup
    setup_logging()

    # Around a unit of work for one patient
    with patient_context("p-123"):
        logger.info("Submitting record", extra={"record_type": "sugar_level"})
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

# =============================================================================
# PATIENT CONTEXT
# =============================================================================

patient_id_var: ContextVar[Optional[str]] = ContextVar("patient_id", default=None)


def get_patient_id() -> Optional[str]:
    """Get the patient ID of the current unit of work."""
    return patient_id_var.get()


@contextmanager
def patient_context(patient_id: str) -> Iterator[None]:
    """Tag every log line emitted inside the block with the patient ID."""
    token = patient_id_var.set(patient_id)
    try:
        yield
    finally:
        patient_id_var.reset(token)


# =============================================================================
# JSON FORMATTER
# =============================================================================

_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message"
}


class JSONFormatter(logging.Formatter):
    """
    Single-line JSON log formatter.

    All timestamps are UTC.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as single-line JSON."""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        patient_id = get_patient_id()
        if patient_id:
            log_entry["patient_id"] = patient_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Fields passed via logger.info("msg", extra={...})
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }

        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry, default=str, ensure_ascii=False)


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; if False, use human-readable format

    Environment Variables:
        LOG_LEVEL: Override the log level
        LOG_FORMAT: Override format ("json" or "text")
    """
    level = os.environ.get("LOG_LEVEL", level).upper()
    json_format = os.environ.get("LOG_FORMAT", "json" if json_format else "text").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        # Human-readable format for local development
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    app_logger = logging.getLogger("maternal_svc")
    app_logger.setLevel(level)
    app_logger.handlers = []  # Inherit from root
    app_logger.propagate = True

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"level": level, "format": "json" if json_format else "text"}
    )
