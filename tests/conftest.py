"""
Pytest configuration and shared fixtures for botpipe tests.
"""

import pytest
import sys
from pathlib import Path

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from botpipe.bus.events import Callback, Chat, Message, Query, User
from botpipe.transport.memory import MemoryTransport


@pytest.fixture
def user():
    """A regular chat user."""
    return User(id=7, username="alice", first_name="Alice")


@pytest.fixture
def chat():
    """A private chat."""
    return Chat(id=100, type="private")


@pytest.fixture
def make_message(user, chat):
    """Factory for messages in the default chat."""
    def _make(text: str = "hello", message_id: int = 1) -> Message:
        return Message(id=message_id, sender=user, chat=chat, text=text)
    return _make


@pytest.fixture
def make_callback(user, chat):
    """Factory for button presses on a bot message."""
    bot_user = User(id=1, username="my_bot", is_bot=True)

    def _make(
        data: str = "btn:1",
        callback_id: str = "cb1",
        message_id: int = 50,
        text: str = "Pick one",
    ) -> Callback:
        message = Message(id=message_id, sender=bot_user, chat=chat, text=text)
        return Callback(id=callback_id, sender=user, message=message, data=data)
    return _make


@pytest.fixture
def query(user):
    return Query(id="q1", sender=user, query="cats")


@pytest.fixture
def transport():
    """In-memory transport recording every outbound call."""
    return MemoryTransport()
