"""Structured logging configuration for the Tecfag RAG pipeline."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

LOGGER_NAME = "tecfag_rag"


class JSONExceptionFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per log record.

    Exceptions derived from ``TecfagRAGError`` contribute their error code and
    context so log aggregators can filter on them.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc = record.exc_info[1]
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(exc) if exc else None,
                "traceback": self.formatException(record.exc_info),
            }
            error_code = getattr(exc, "error_code", None)
            if error_code:
                log_entry["exception"]["code"] = error_code
            extra_context = getattr(exc, "extra_context", None)
            if extra_context:
                log_entry["exception"]["context"] = extra_context

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional file path for log output.
        json_format: If True, output logs in JSON format.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JSONExceptionFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    # stderr keeps CLI answers on stdout clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the package logger or one of its children."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
