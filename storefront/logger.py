"""
Structured logging for the storefront engine.

Every line is one JSON object. Call sites attach request details with
`extra={"context": {...}}`; they land under the "context" key.
"""
import logging
import sys
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from storefront.config import config

LOGGER_NAME = "storefront"


class StructuredFormatter(logging.Formatter):
    """Renders a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict) and context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Values such as Enum members or exceptions fall back to str()
        return json.dumps(entry, default=str)


def setup_logger(level: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the package logger.

    Only the `storefront` logger gets a handler; the host application's
    root logger is left alone.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if level is None:
        level = "DEBUG" if config.DEBUG else config.LOG_LEVEL
    logger.setLevel(level.upper())

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(StructuredFormatter())

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


logger = setup_logger()
