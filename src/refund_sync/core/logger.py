"""Structured JSON logging for the refund sync service."""

import json
import logging
import os
import sys
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_TZ = ZoneInfo(os.getenv("LOG_TIMEZONE", "UTC"))

RUN_ID = uuid.uuid4().hex[:8]

EXTRA_FIELDS = ("request_id", "event_id", "event_type")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with webhook context when supplied via `extra=`."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(LOG_TZ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            {field: getattr(record, field) for field in EXTRA_FIELDS if hasattr(record, field)}
        )

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(entry, default=str)


def log_file_path() -> Path:
    """Per-run log file: refund_sync_<date>_<run id>.log under LOG_DIR."""
    run_date = datetime.now(LOG_TZ).strftime("%Y-%m-%d")
    return LOG_DIR / f"refund_sync_{run_date}_{RUN_ID}.log"


def configure_logging() -> None:
    """Attach JSON handlers to the root logger unless something already has."""
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(logging.DEBUG)
    formatter = JSONFormatter()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    console.setFormatter(formatter)
    root.addHandler(console)

    if LOG_TO_FILE:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path())
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


configure_logging()


def setup_logger(name: str) -> logging.Logger:
    """Get logger for a module."""
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
