"""Logging setup for loan-origination.

Loan workflows run on worker threads, so both formats carry the thread
name. Service log calls attach the loan context with
``extra={"loan_id": ..., "state": ...}``; the JSON formatter lifts those
attributes into top-level fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from loan_origination.exceptions import ConfigurationError

if TYPE_CHECKING:
    from loan_origination.config import LoanOriginationConfig

LOG_FORMATS = ("standard", "json")

# Record attributes emitted as JSON fields when a log call supplies them
CONTEXT_FIELDS = ("loan_id", "state", "topic")

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Configure the root logger for loan-origination.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown names
        fall back to INFO.
    format_type : str
        "standard" or "json".

    Raises
    ------
    ConfigurationError
        If ``format_type`` is not a known format.
    """
    if format_type not in LOG_FORMATS:
        raise ConfigurationError(
            f"Unknown log format {format_type!r}, expected one of {LOG_FORMATS}"
        )
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = LoanJsonFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("loan_origination").setLevel(log_level)

    # librdkafka and Faker are chatty at DEBUG
    logging.getLogger("confluent_kafka").setLevel(logging.WARNING)
    logging.getLogger("faker").setLevel(logging.WARNING)


def configure_logging(config: "LoanOriginationConfig", format_type: str | None = None) -> None:
    """Apply the level and format from ``config``; ``format_type`` overrides the format."""
    setup_logging(config.log_level, format_type or config.log_format)


class LoanJsonFormatter(logging.Formatter):
    """One JSON object per line, with loan context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)
