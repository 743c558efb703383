"""
Tests for the data model and the chat session flow.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class RecordingClient:
    """Stands in for GeminiClient and remembers what it was sent."""

    def __init__(self, reply="$$ x^2 + C $$"):
        self.reply = reply
        self.calls = []

    def send_message(self, history, new_message, new_images=None, context_message=None):
        self.calls.append(
            {
                "history": history,
                "message": new_message,
                "images": new_images,
                "context": context_message,
            }
        )
        return self.reply


class ExplodingClient:
    def send_message(self, *args, **kwargs):
        raise RuntimeError("boom")


class TestConversation:
    """Tests for the in-memory conversation."""

    def test_starts_with_welcome(self):
        from lapbom.models import Conversation, Role

        conv = Conversation()

        assert len(conv) == 1
        assert conv[0].id == "welcome"
        assert conv[0].role == Role.MODEL
        assert conv[0].content == "Ready. Enter problem."

    def test_clear_leaves_cleared_greeting(self):
        from lapbom.models import Conversation, Message, Role

        conv = Conversation()
        conv.append(Message(id="1", role=Role.USER, content="∫ x dx"))
        conv.clear()

        assert len(conv) == 1
        assert conv[0].id == "welcome"
        assert conv[0].content == "History cleared."

    def test_insertion_order_kept(self):
        from lapbom.models import Conversation, Message, Role

        conv = Conversation()
        for i in range(5):
            conv.append(Message(id=str(i), role=Role.USER, content=f"q{i}"))

        assert [m.id for m in conv][1:] == ["0", "1", "2", "3", "4"]

    def test_snapshot_is_a_copy(self):
        from lapbom.models import Conversation, Message, Role

        conv = Conversation()
        snap = conv.snapshot()
        conv.append(Message(id="1", role=Role.USER, content="x"))

        assert len(snap) == 1
        assert len(conv) == 2

    def test_find(self):
        from lapbom.models import Conversation

        conv = Conversation()
        assert conv.find("welcome") is conv[0]
        assert conv.find("missing") is None

    def test_message_defaults(self):
        from lapbom.models import Message, Role

        msg = Message(id="1", role=Role.USER, content="hi")

        assert msg.images == []
        assert msg.has_images is False
        assert msg.is_thinking is False


class TestChatSessionInput:
    """Tests for input-side session state."""

    def test_cannot_send_blank(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        assert session.can_send("   ") is False
        assert session.can_send("∫ x dx") is True

    def test_image_alone_can_be_sent(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        session.attach_image("aGVsbG8=")
        assert session.can_send("") is True

    def test_cannot_send_while_loading(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        session.is_loading = True
        assert session.can_send("∫ x dx") is False

    def test_remove_image(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        session.attach_image("a")
        session.attach_image("b")
        session.remove_image(0)
        session.remove_image(7)  # out of range is ignored

        assert session.attached_images == ["b"]

    def test_placeholder_priority(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        assert session.placeholder() == "e.g. ∫ 2x dx"

        session.toggle_keypad()
        assert session.placeholder() == "Type math here..."

        session.set_reply_to(session.messages[0])
        assert session.placeholder() == "Explain which part?"

    def test_reply_only_to_model_messages(self):
        from lapbom.models import Message, Role
        from lapbom.session import ChatSession

        session = ChatSession()
        with pytest.raises(ValueError):
            session.set_reply_to(Message(id="1", role=Role.USER, content="q"))

    def test_highlight_input(self):
        from lapbom.session import ChatSession

        assert ChatSession.highlight_input(r"\frac{1}{2}") is True
        assert ChatSession.highlight_input("x = 2") is True
        assert ChatSession.highlight_input("hello") is False


class TestChatSessionSubmit:
    """Tests for the send flow."""

    def test_submit_appends_user_and_model(self):
        from lapbom.models import Role
        from lapbom.session import ChatSession

        session = ChatSession()
        client = RecordingClient()

        reply = session.submit("∫ 2x dx", client)

        assert [m.role for m in session.messages] == [Role.MODEL, Role.USER, Role.MODEL]
        assert session.messages[1].content == "∫ 2x dx"
        assert reply.content == "$$ x^2 + C $$"
        assert session.is_loading is False

    def test_history_excludes_new_message(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        client = RecordingClient()
        session.submit("first", client)
        session.submit("second", client)

        second_call = client.calls[1]
        assert [m.content for m in second_call["history"]] == [
            "Ready. Enter problem.",
            "first",
            "$$ x^2 + C $$",
        ]
        assert second_call["message"] == "second"

    def test_image_only_prompt(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        session.attach_image("aGVsbG8=")
        client = RecordingClient()
        session.submit("", client)

        call = client.calls[0]
        assert call["message"] == "Analyze this image"
        assert call["images"] == ["aGVsbG8="]
        # The stored user message keeps the raw (empty) text
        assert session.messages[1].content == ""
        assert session.messages[1].images == ["aGVsbG8="]

    def test_submit_resets_input_state(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        session.attach_image("aGVsbG8=")
        session.toggle_keypad()
        session.set_reply_to(session.messages[0])

        session.submit("why?", RecordingClient())

        assert session.attached_images == []
        assert session.reply_to is None
        assert session.show_keypad is False

    def test_reply_context_forwarded(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        client = RecordingClient()
        answer = session.submit("∫ 2x dx", client)

        session.set_reply_to(answer)
        session.submit("Why +C?", client)

        assert client.calls[0]["context"] is None
        assert client.calls[1]["context"] == "$$ x^2 + C $$"

    def test_refuses_when_nothing_to_send(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        client = RecordingClient()

        assert session.submit("  ", client) is None
        assert client.calls == []
        assert len(session.messages) == 1

    def test_reply_id_follows_user_id(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        session.submit("q", RecordingClient())

        user_id = int(session.messages[1].id)
        model_id = int(session.messages[2].id)
        assert model_id == user_id + 1

    def test_loading_cleared_on_failure(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        with pytest.raises(RuntimeError):
            session.submit("q", ExplodingClient())

        assert session.is_loading is False

    def test_begin_submit_blocks_second_send(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        pending = session.begin_submit("first")

        assert pending is not None
        assert session.is_loading is True
        assert session.begin_submit("second") is None

        session.complete("done", pending)
        assert session.is_loading is False

    def test_clear_history(self):
        from lapbom.session import ChatSession

        session = ChatSession()
        session.submit("q", RecordingClient())
        session.set_reply_to(session.messages[-1])
        session.clear_history()

        assert len(session.messages) == 1
        assert session.messages[0].content == "History cleared."
        assert session.reply_to is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
