"""
Core data structures for Lap Bom.

These dataclasses define the contract between the chat session,
the API client and the views.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


WELCOME_ID = "welcome"
WELCOME_TEXT = "Ready. Enter problem."
CLEARED_TEXT = "History cleared."


class Role(str, Enum):
    """Author of a chat message (values match the remote service roles)."""

    USER = "user"
    MODEL = "model"


@dataclass
class Message:
    """
    A single chat message.

    Images are base64-encoded JPEG bodies without a data-URL prefix.
    ``is_thinking`` marks the placeholder row shown while a reply is pending.
    """

    id: str
    role: Role
    content: str
    images: List[str] = field(default_factory=list)
    is_thinking: bool = False

    @property
    def has_images(self) -> bool:
        return bool(self.images)

    @property
    def is_welcome(self) -> bool:
        """True for the locally generated greeting that opens a conversation."""
        return self.id == WELCOME_ID


@dataclass
class GenerationConfig:
    """Optional generation settings forwarded to the model."""

    thinking_budget: Optional[int] = None


def new_message_id(offset: int = 0) -> str:
    """Millisecond timestamp id; ``offset`` keeps a reply after its prompt."""
    return str(int(time.time() * 1000) + offset)


class Conversation:
    """
    Ordered, in-memory list of messages.

    Usage:
        conv = Conversation()
        conv.append(Message(new_message_id(), Role.USER, "∫ 2x dx"))
        history = conv.snapshot()
    """

    def __init__(self):
        self._messages: List[Message] = [
            Message(id=WELCOME_ID, role=Role.MODEL, content=WELCOME_TEXT)
        ]

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def clear(self) -> None:
        """Drop all messages and leave a single 'History cleared.' greeting."""
        self._messages = [
            Message(id=WELCOME_ID, role=Role.MODEL, content=CLEARED_TEXT)
        ]

    def snapshot(self) -> List[Message]:
        """Copy of the message list, safe to hand to a worker thread."""
        return list(self._messages)

    def find(self, message_id: str) -> Optional[Message]:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    @property
    def messages(self) -> List[Message]:
        return self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
