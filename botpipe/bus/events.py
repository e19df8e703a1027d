"""
Event types exchanged with the transport.

Inbound:
- Message: a text message in a chat
- Callback: a button press attached to a message
- Query: an inline query (received, not routed)

Outbound:
- SendOptions / ParseMode for text rendering
- Photo attachments
- CallbackAnswer for button acknowledgements
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union


@dataclass(frozen=True)
class User:
    """A chat participant."""
    id: int
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    is_bot: bool = False

    @property
    def display_name(self) -> str:
        """Best human-readable name for the user."""
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.username or str(self.id)


@dataclass(frozen=True)
class Chat:
    """A conversation the bot takes part in."""
    id: int
    type: str = "private"  # private, group, supergroup, channel
    title: str = ""
    username: str = ""


@dataclass(frozen=True)
class Message:
    """A text message received from a chat."""
    id: int
    sender: User
    chat: Chat
    text: str = ""
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)  # Transport-specific data


@dataclass(frozen=True)
class Callback:
    """A button press. Always carries the message the button belongs to."""
    id: str
    sender: User
    message: Message
    data: str = ""  # Button payload
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Query:
    """An inline query typed by a user in any chat."""
    id: str
    sender: User
    query: str = ""
    offset: str = ""
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)


# Exactly one of the three inbound kinds
InboundEvent = Union[Message, Callback, Query]


class ParseMode(str, Enum):
    """Formatting modes understood by the transport."""
    DEFAULT = ""
    MARKDOWN = "Markdown"
    MARKDOWN_V2 = "MarkdownV2"
    HTML = "HTML"


class ChatAction(str, Enum):
    """Presence hints shown to the chat while the bot works."""
    TYPING = "typing"
    UPLOAD_PHOTO = "upload_photo"


@dataclass(frozen=True)
class SendOptions:
    """Rendering options for outbound text, edits and photos."""
    parse_mode: ParseMode = ParseMode.DEFAULT
    reply_to_message_id: int | None = None
    disable_web_page_preview: bool = False
    disable_notification: bool = False
    reply_markup: dict[str, Any] | None = None  # Keyboard markup, passed through verbatim

    def with_parse_mode(self, parse_mode: ParseMode) -> "SendOptions":
        """Copy of these options with another parse mode."""
        return replace(self, parse_mode=parse_mode)


@dataclass(frozen=True)
class Photo:
    """A photo attachment. At least one source must be set."""
    file_id: str | None = None
    file_path: str | None = None
    url: str | None = None
    data: bytes | None = None
    caption: str = ""

    def __post_init__(self):
        if not any([self.file_id, self.file_path, self.url, self.data]):
            raise ValueError("Photo must have at least one source")


@dataclass(frozen=True)
class CallbackAnswer:
    """Reply to a button press, shown as a toast or an alert."""
    text: str = ""
    show_alert: bool = False
