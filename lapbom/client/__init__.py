"""Remote solver client."""

from .gemini import GeminiClient, build_history, build_user_parts

__all__ = ["GeminiClient", "build_history", "build_user_parts"]
