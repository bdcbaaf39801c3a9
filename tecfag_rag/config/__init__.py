"""Configuration package."""

from .logging import get_logger, setup_logging
from .settings import Settings, settings

__all__ = ["Settings", "get_logger", "settings", "setup_logging"]
