"""Logging setup for collection-engine runs.

Every engine computation is evaluated against a reference day, so log
records carry it as ``as_of`` next to the usual level and logger name.
Engines attach structured context (title and debt ids, amounts) through
``extra={"extra": {...}}``; the JSON formatter flattens it into the record.
"""

import json
import logging
import sys
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(as_of)s | %(name)s | %(message)s"


class ReferenceDateFilter(logging.Filter):
    """Stamp records with the reference day of the current run."""

    def __init__(self, reference_date: date | None = None) -> None:
        super().__init__()
        self.reference_date = reference_date

    def filter(self, record: logging.LogRecord) -> bool:
        record.as_of = self.reference_date.isoformat() if self.reference_date else "-"
        return True


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    reference_date: date | None = None,
) -> None:
    """Configure logging for collection-engine.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown names
        fall back to INFO.
    format_type : str
        "standard" for pipe-separated text, "json" for one JSON object per
        line.
    reference_date : date | None
        The run's "today", added to every record as ``as_of``.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(ReferenceDateFilter(reference_date))
    root_logger.addHandler(console_handler)

    logging.getLogger("collection_engine").setLevel(log_level)

    # Faker logs locale lookups at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class JsonFormatter(logging.Formatter):
    """One JSON object per record; money stays a string."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if getattr(record, "as_of", "-") != "-":
            log_data["as_of"] = record.as_of

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if isinstance(getattr(record, "extra", None), dict):
            log_data.update(record.extra)

        return json.dumps(log_data, default=_json_default, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Parameters
    ----------
    name : str
        Logger name (usually __name__).

    Returns
    -------
    logging.Logger
        Configured logger.
    """
    return logging.getLogger(name)
