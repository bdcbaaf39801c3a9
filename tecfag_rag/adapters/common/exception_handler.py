"""Exception formatting and logging helpers shared by adapters."""

import json
import logging
import traceback
from typing import Any

from ...core.domain.exceptions import TecfagRAGError

logger = logging.getLogger(__name__)


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Format any exception as a structured dictionary.

    ``TecfagRAGError`` instances use their own ``to_dict``. Other exceptions
    are described from their traceback.

    Args:
        exc: The exception to format.
        include_trace: If True, include the full stack trace.
        extra_context: Additional context to include in output.

    Returns:
        Dictionary with structured error information.
    """
    if isinstance(exc, TecfagRAGError):
        result = exc.to_dict(include_trace=include_trace)
        if extra_context:
            result.setdefault("context", {}).update(extra_context)
        return result

    tb = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last_frame = tb[-1] if tb else None

    result: dict[str, Any] = {
        "error": {
            "type": type(exc).__name__,
            "code": get_error_code(exc),
            "message": str(exc),
        },
        "location": {
            "class": "<unknown>",
            "method": last_frame.name if last_frame else "<unknown>",
            "file": last_frame.filename.split("\\")[-1].split("/")[-1] if last_frame else "<unknown>",
            "line": last_frame.lineno if last_frame else 0,
        },
    }

    if extra_context:
        result["context"] = extra_context

    if include_trace:
        result["stack_trace"] = [
            line.strip()
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
            if line.strip()
        ]

    return result


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log an exception as structured JSON."""
    log_instance = log or logger
    exc_data = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    log_instance.log(level, json.dumps(exc_data, indent=2, ensure_ascii=False, default=str))


def get_error_code(exc: Exception) -> str:
    """Error code of a package exception, ``PYTHON_ERR`` for anything else."""
    if isinstance(exc, TecfagRAGError):
        return exc.error_code
    return "PYTHON_ERR"
