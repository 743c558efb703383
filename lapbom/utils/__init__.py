"""Utilities: configuration and error handling."""

from .config import Settings, load_settings, configure_logging
from .errors import LapBomError, ErrorContext, ErrorSeverity

__all__ = [
    "Settings",
    "load_settings",
    "configure_logging",
    "LapBomError",
    "ErrorContext",
    "ErrorSeverity",
]
