"""
Application settings.

Values come from the process environment, optionally seeded from a
``.env`` file in the working directory.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError


DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MAX_SIZE = 1024  # Longest side of uploaded images, in pixels
DEFAULT_LOG_LEVEL = "WARNING"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    """Runtime configuration for the client and the GUI."""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    image_max_size: int = DEFAULT_IMAGE_MAX_SIZE
    log_level: str = DEFAULT_LOG_LEVEL

    def require_api_key(self) -> str:
        """Return the API key or raise ConfigError if it is not set."""
        if not self.api_key:
            raise ConfigError(
                "No API key configured for the solver service.",
                technical_details="Looked for GEMINI_API_KEY and API_KEY",
            )
        return self.api_key


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env_file: Explicit .env path. Defaults to searching from the
                  current directory. Existing variables are not overridden.

    Raises:
        ConfigError: If a numeric setting cannot be parsed.
    """
    load_dotenv(env_file)

    raw_size = os.getenv("LAPBOM_IMAGE_MAX_SIZE", str(DEFAULT_IMAGE_MAX_SIZE))
    try:
        image_max_size = int(raw_size)
    except ValueError:
        raise ConfigError(
            f"Invalid LAPBOM_IMAGE_MAX_SIZE: {raw_size!r}",
            suggestions=["Use a whole number of pixels, e.g. 1024"],
        )
    if image_max_size <= 0:
        raise ConfigError(
            f"LAPBOM_IMAGE_MAX_SIZE must be positive, got {image_max_size}",
            suggestions=["Use a whole number of pixels, e.g. 1024"],
        )

    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
        model=os.getenv("LAPBOM_MODEL") or DEFAULT_MODEL,
        image_max_size=image_max_size,
        log_level=(os.getenv("LAPBOM_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure root logging once for the process."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
