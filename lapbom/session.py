"""
Chat session state and request orchestration.

Holds everything the chat view shows (conversation, attached images,
reply target, keypad and loading flags) without depending on Qt, so the
same flow drives the GUI, the CLI and the tests.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .client.prompts import IMAGE_ONLY_PROMPT
from .models import Conversation, Message, Role, new_message_id
from .output.preview import looks_like_latex


logger = logging.getLogger(__name__)

PLACEHOLDER_REPLY = "Explain which part?"
PLACEHOLDER_KEYPAD = "Type math here..."
PLACEHOLDER_DEFAULT = "e.g. ∫ 2x dx"


@dataclass
class PendingRequest:
    """Everything the API client needs for one turn."""

    history: List[Message]
    prompt: str
    images: List[str] = field(default_factory=list)
    context: Optional[str] = None
    user_message: Optional[Message] = None


class ChatSession:
    """
    State machine of the chat view.

    Sending is split in two so the network call can run off the GUI thread:
    ``begin_submit`` records the user message and returns a PendingRequest,
    ``complete`` records the reply. ``submit`` does both with a client.

    Usage:
        session = ChatSession()
        session.attach_image(jpeg_b64)
        reply = session.submit("∫ 2x dx", client)
    """

    def __init__(self):
        self.conversation = Conversation()
        self.attached_images: List[str] = []
        self.reply_to: Optional[Message] = None
        self.is_loading = False
        self.show_keypad = False

    # === Input state ===

    def can_send(self, text: str) -> bool:
        """False while a request is running or when there is nothing to send."""
        if self.is_loading:
            return False
        return bool(text.strip()) or bool(self.attached_images)

    def attach_image(self, b64: str) -> None:
        self.attached_images.append(b64)

    def remove_image(self, index: int) -> None:
        """Remove an attached image; out-of-range indices are ignored."""
        if 0 <= index < len(self.attached_images):
            del self.attached_images[index]

    def set_reply_to(self, message: Message) -> None:
        """Make the next question refer to an earlier model answer."""
        if message.role != Role.MODEL:
            raise ValueError("Only model answers can be asked about")
        self.reply_to = message

    def cancel_reply(self) -> None:
        self.reply_to = None

    def toggle_keypad(self) -> bool:
        self.show_keypad = not self.show_keypad
        return self.show_keypad

    def placeholder(self) -> str:
        """Hint text for the input box."""
        if self.reply_to is not None:
            return PLACEHOLDER_REPLY
        if self.show_keypad:
            return PLACEHOLDER_KEYPAD
        return PLACEHOLDER_DEFAULT

    @staticmethod
    def highlight_input(text: str) -> bool:
        """True when the input looks like LaTeX and the box should be highlighted."""
        return looks_like_latex(text)

    # === Sending ===

    def begin_submit(self, text: str) -> Optional[PendingRequest]:
        """
        Record the user message and prepare the request.

        Returns:
            PendingRequest, or None if nothing can be sent right now.
        """
        if not self.can_send(text):
            return None

        # The model sees the conversation as it was before this message
        history = self.conversation.snapshot()

        user_message = Message(
            id=new_message_id(),
            role=Role.USER,
            content=text,
            images=list(self.attached_images),
        )
        context = self.reply_to.content if self.reply_to is not None else None

        self.conversation.append(user_message)
        self.attached_images = []
        self.reply_to = None
        self.show_keypad = False
        self.is_loading = True

        logger.debug(
            "Submitting message %s (%d images, context=%s)",
            user_message.id,
            len(user_message.images),
            context is not None,
        )
        return PendingRequest(
            history=history,
            prompt=text or IMAGE_ONLY_PROMPT,
            images=user_message.images,
            context=context,
            user_message=user_message,
        )

    def complete(self, reply: str, pending: Optional[PendingRequest] = None) -> Message:
        """Append the model reply and leave the loading state."""
        user_message = pending.user_message if pending is not None else None
        if user_message is not None and user_message.id.isdigit():
            message_id = str(int(user_message.id) + 1)
        else:
            message_id = new_message_id(1)

        reply_message = Message(id=message_id, role=Role.MODEL, content=reply)
        self.conversation.append(reply_message)
        self.is_loading = False
        return reply_message

    def fail(self) -> None:
        """Leave the loading state without a reply."""
        self.is_loading = False

    def submit(self, text: str, client) -> Optional[Message]:
        """
        Send a message synchronously.

        Args:
            text: Input text (may be empty when images are attached)
            client: Object with a ``send_message(history, text, images, context)``
                    method, normally a GeminiClient

        Returns:
            The appended model message, or None if nothing was sent.
        """
        pending = self.begin_submit(text)
        if pending is None:
            return None
        try:
            reply = client.send_message(
                pending.history, pending.prompt, pending.images, pending.context
            )
        except Exception:
            self.fail()
            raise
        return self.complete(reply, pending)

    def clear_history(self) -> None:
        self.conversation.clear()
        self.reply_to = None

    @property
    def messages(self) -> List[Message]:
        return self.conversation.messages
