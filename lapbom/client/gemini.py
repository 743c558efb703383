"""
Client for the Gemini solver model.

Serializes the conversation and the new message (text + images) into the
Google GenAI request shape, sends it through a chat session and returns
the reply text.
"""

import base64
import binascii
import logging
import time
from typing import List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..models import GenerationConfig, Message
from ..utils.config import Settings
from ..utils.errors import ImageError, ServiceError
from .prompts import SYSTEM_INSTRUCTION, wrap_with_context


logger = logging.getLogger(__name__)

IMAGE_MIME = "image/jpeg"
FALLBACK_REPLY = "Solution generated."
DEFAULT_ERROR = "Something went wrong while solving the problem."


def image_part(b64: str) -> types.Part:
    """Inline-data part for a base64 JPEG body."""
    try:
        data = base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageError("Attached image is not valid base64", technical_details=str(e))
    return types.Part(inline_data=types.Blob(mime_type=IMAGE_MIME, data=data))


def build_user_parts(
    new_message: str,
    new_images: Optional[List[str]] = None,
    context_message: Optional[str] = None,
) -> List[types.Part]:
    """
    Parts for the message being sent.

    Images come first, then the text. When ``context_message`` is given the
    text is framed as a question about that earlier output. The text part is
    left out if there is no text at all (the service needs at least one part).
    """
    parts = [image_part(img) for img in new_images or []]

    prompt = new_message
    if context_message:
        prompt = wrap_with_context(new_message, context_message)

    if prompt:
        parts.append(types.Part(text=prompt))
    return parts


def build_history(history: List[Message]) -> List[types.Content]:
    """
    Map chat messages to request contents.

    The local greeting is not part of the model's conversation and is skipped.
    Empty text is left out, as in ``build_user_parts``.
    """
    contents = []
    for msg in history:
        if msg.is_welcome:
            continue
        parts = [image_part(img) for img in msg.images]
        if msg.content:
            parts.append(types.Part(text=msg.content))
        if not parts:
            continue
        contents.append(types.Content(role=msg.role.value, parts=parts))
    return contents


class GeminiClient:
    """
    Sends chat turns to Gemini.

    Usage:
        client = GeminiClient(load_settings())
        reply = client.send_message(history, "∫ 2x dx")
    """

    def __init__(
        self,
        settings: Settings,
        client=None,
        generation: Optional[GenerationConfig] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Application settings (API key and model name)
            client: Pre-built ``genai.Client``-like object. Built from the
                    API key when omitted.
            generation: Optional generation settings

        Raises:
            ConfigError: If no client is given and no API key is configured.
        """
        self.model = settings.model
        self.generation = generation or GenerationConfig()
        self._client = client or genai.Client(api_key=settings.require_api_key())

    def _config(self) -> types.GenerateContentConfig:
        config = types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )
        if self.generation.thinking_budget is not None:
            config.thinking_config = types.ThinkingConfig(
                thinking_budget=self.generation.thinking_budget
            )
        return config

    def request(
        self,
        history: List[Message],
        new_message: str,
        new_images: Optional[List[str]] = None,
        context_message: Optional[str] = None,
    ) -> str:
        """
        Send one turn and return the reply text.

        Args:
            history: Conversation before the new message
            new_message: Text of the new message (may be empty)
            new_images: Base64 JPEG bodies attached to the new message
            context_message: Earlier model output the question refers to

        Returns:
            Reply text, or "Solution generated." if the reply carried no text.

        Raises:
            ServiceError: If the request fails.
            ImageError: If an attached image is not valid base64.
        """
        parts = build_user_parts(new_message, new_images, context_message)
        contents = build_history(history)

        start_time = time.perf_counter()
        try:
            chat = self._client.chats.create(
                model=self.model, history=contents, config=self._config()
            )
            response = chat.send_message(message=parts)
        except genai_errors.APIError as e:
            raise ServiceError(
                e.message or DEFAULT_ERROR,
                technical_details=f"{type(e).__name__} {e.code}: {e.status}",
            )
        except Exception as e:
            raise ServiceError(
                str(e) or DEFAULT_ERROR,
                technical_details=f"{type(e).__name__}: {e}",
            )

        elapsed_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            "Solver replied in %dms (%d history turns, %d images)",
            elapsed_ms,
            len(contents),
            len(new_images or []),
        )
        return _response_text(response) or FALLBACK_REPLY

    def send_message(
        self,
        history: List[Message],
        new_message: str,
        new_images: Optional[List[str]] = None,
        context_message: Optional[str] = None,
    ) -> str:
        """
        Like ``request`` but never raises: failures come back as
        ``"Error: <message>"`` so they can be shown as a model reply.
        """
        try:
            return self.request(history, new_message, new_images, context_message)
        except (ServiceError, ImageError) as e:
            logger.error("Solver request failed: %s", e.user_message)
            return f"Error: {e.user_message or DEFAULT_ERROR}"


def _response_text(response) -> str:
    """Text of a response; empty if the SDK cannot produce one."""
    try:
        return response.text or ""
    except (ValueError, AttributeError):
        return ""
