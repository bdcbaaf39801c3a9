"""Helpers shared by inbound and outbound adapters."""

from .exception_handler import format_exception_json, get_error_code, log_exception
from .rate_limiter import AsyncRateLimiter

__all__ = ["AsyncRateLimiter", "format_exception_json", "get_error_code", "log_exception"]
