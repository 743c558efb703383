"""
Centralized error handling for Lap Bom.

Provides a hierarchy of custom exceptions with user-friendly messages,
suggestions for fixes, and error recovery hints.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    INFO = auto()  # Informational, nothing failed
    WARNING = auto()  # Non-fatal, can continue with degraded functionality
    ERROR = auto()  # Operation failed, but can retry
    CRITICAL = auto()  # Unrecoverable error


@dataclass
class ErrorContext:
    """
    Rich context for error reporting.

    Provides user-friendly information beyond the raw exception.
    """

    title: str  # Short title for dialog/status bar
    message: str  # User-friendly message
    technical_details: Optional[str]  # Debug info (shown on expand)
    suggestions: List[str]  # Actionable suggestions
    severity: ErrorSeverity
    recoverable: bool = True  # Can user retry?

    @classmethod
    def from_exception(cls, exc: Exception, context: str = "") -> "ErrorContext":
        """Create ErrorContext from any exception using smart detection."""
        exc_type = type(exc).__name__
        exc_msg = str(exc)

        if isinstance(exc, LapBomError):
            return exc.to_context()

        # Network / remote service failures
        if isinstance(exc, (ConnectionError, TimeoutError)) or "timed out" in exc_msg.lower():
            return cls(
                title="Connection Problem",
                message="Could not reach the solver service.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check your internet connection",
                    "Try sending the problem again",
                ],
                severity=ErrorSeverity.WARNING,
            )

        # Import/dependency errors
        if isinstance(exc, ImportError):
            return cls(
                title="Missing Dependency",
                message="A required component is not installed.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check that all dependencies are installed",
                    "Run: pip install -e .[dev]",
                    "Restart the application",
                ],
                severity=ErrorSeverity.CRITICAL,
                recoverable=False,
            )

        # Generic fallback
        return cls(
            title="Error",
            message=f"An unexpected error occurred: {exc_msg}",
            technical_details=f"{exc_type}: {exc_msg}\nContext: {context}",
            suggestions=["Try again", "Restart the application"],
            severity=ErrorSeverity.ERROR,
        )


class LapBomError(Exception):
    """
    Base exception for all Lap Bom errors.

    Subclasses provide rich error context for user-friendly reporting.
    """

    default_title = "Error"
    default_suggestions: List[str] = []
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        *,
        suggestions: Optional[List[str]] = None,
        technical_details: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
    ):
        super().__init__(message)
        self.user_message = message
        self.suggestions = suggestions or self.default_suggestions.copy()
        self.technical_details = technical_details
        self.severity = severity or self.default_severity

    def to_context(self) -> ErrorContext:
        """Convert to ErrorContext for display."""
        return ErrorContext(
            title=self.default_title,
            message=self.user_message,
            technical_details=self.technical_details,
            suggestions=self.suggestions,
            severity=self.severity,
            recoverable=self.severity != ErrorSeverity.CRITICAL,
        )


# === Configuration Errors ===


class ConfigError(LapBomError):
    """Raised when required settings are missing or invalid."""

    default_title = "Configuration Error"
    default_severity = ErrorSeverity.CRITICAL
    default_suggestions = [
        "Set GEMINI_API_KEY in your environment or in a .env file",
        "Restart the application after changing the configuration",
    ]


# === Input Errors ===


class CameraError(LapBomError):
    """Raised when the camera cannot be opened or a frame cannot be grabbed."""

    default_title = "Camera Error"
    default_suggestions = [
        "Check that a camera is connected and not used by another program",
        "Check camera permissions for this application",
        "Upload a photo of the problem instead",
    ]


class ImageError(LapBomError):
    """Raised when an uploaded or captured image cannot be processed."""

    default_title = "Image Error"
    default_suggestions = [
        "Make sure the file is a PNG or JPEG image",
        "Try taking the photo again",
        "Type the problem instead",
    ]

    def __init__(self, message: str, *, path: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


# === Service Errors ===


class ServiceError(LapBomError):
    """Raised when the remote model service call fails."""

    default_title = "Solver Service Error"
    default_suggestions = [
        "Check your internet connection",
        "Verify that the API key is valid",
        "Try sending the problem again",
    ]


# === Utility functions ===


def format_error_for_user(exc: Exception, context: str = "") -> str:
    """
    Format an exception into a user-friendly string.

    Returns a single string suitable for status bar or simple display.
    """
    ctx = ErrorContext.from_exception(exc, context)

    result = ctx.message
    if ctx.suggestions:
        result += f" Try: {ctx.suggestions[0]}"

    return result


def format_error_for_dialog(exc: Exception, context: str = "") -> dict:
    """
    Format an exception into a dict suitable for QMessageBox.

    Returns dict with 'title', 'text', 'detailed_text', 'icon' keys.
    """
    from PyQt6.QtWidgets import QMessageBox

    ctx = ErrorContext.from_exception(exc, context)

    # Build detailed text with suggestions
    detailed_parts = []
    if ctx.suggestions:
        detailed_parts.append("Suggestions:")
        for i, sugg in enumerate(ctx.suggestions, 1):
            detailed_parts.append(f"  {i}. {sugg}")
    if ctx.technical_details:
        detailed_parts.append("")
        detailed_parts.append("Technical details:")
        detailed_parts.append(ctx.technical_details)

    icon_map = {
        ErrorSeverity.INFO: QMessageBox.Icon.Information,
        ErrorSeverity.WARNING: QMessageBox.Icon.Warning,
        ErrorSeverity.ERROR: QMessageBox.Icon.Critical,
        ErrorSeverity.CRITICAL: QMessageBox.Icon.Critical,
    }

    return {
        "title": ctx.title,
        "text": ctx.message,
        "detailed_text": "\n".join(detailed_parts) if detailed_parts else None,
        "icon": icon_map.get(ctx.severity, QMessageBox.Icon.Warning),
    }
