"""
Unified request for one inbound event.

A Pipe normalizes a Message or a Callback into one read/act interface:
- read accessors for ids, text, command, sender and chat
- actions (send, edit, photo, answer, delete, typing) that go back to the
  owning chat through the transport

One Pipe is created per event and dropped when that event is done.
"""

from functools import cached_property

from botpipe.bus.events import (
    Callback,
    CallbackAnswer,
    Chat,
    ChatAction,
    Message,
    ParseMode,
    Photo,
    SendOptions,
    User,
)
from botpipe.errors import InvalidConstruction
from botpipe.pipe.commands import CommandDescriptor, parse_command, strip_command
from botpipe.transport.base import Transport


def embed_send_options(options: SendOptions | None) -> SendOptions:
    """
    Effective options for an outbound call.

    No options means default options; the default parse mode is rewritten
    to Markdown. The given object is not modified.
    """
    if options is None:
        options = SendOptions(parse_mode=ParseMode.DEFAULT)

    if options.parse_mode == ParseMode.DEFAULT:
        options = options.with_parse_mode(ParseMode.MARKDOWN)

    return options


class Pipe:
    """
    Request/response handle built from a Message or a Callback.

    A Callback always carries the message its button belongs to; sender
    and chat are resolved from that message, so both event kinds resolve
    them the same way.
    """

    def __init__(self, event: Message | Callback, transport: Transport):
        if event is None:
            raise InvalidConstruction("expected message or callback, nothing given")
        if not isinstance(event, (Message, Callback)):
            raise InvalidConstruction(
                f"expected message or callback, got {type(event).__name__}"
            )
        if transport is None:
            raise InvalidConstruction("empty transport given")

        if isinstance(event, Callback):
            self._callback: Callback | None = event
            self._message = event.message
        else:
            self._callback = None
            self._message = event

        self._transport = transport

    @classmethod
    def from_parts(
        cls,
        message: Message | None = None,
        callback: Callback | None = None,
        transport: Transport | None = None,
    ) -> "Pipe":
        """
        Build a Pipe from an optional message and an optional callback.

        Raises:
            InvalidConstruction: both are missing, the transport is missing,
                or the message is not the one embedded in the callback.
        """
        if message is None and callback is None:
            raise InvalidConstruction("expected message or callback, nothing given")
        if callback is not None:
            if message is not None and message != callback.message:
                raise InvalidConstruction("message does not belong to callback")
            return cls(callback, transport)
        return cls(message, transport)

    def __repr__(self) -> str:
        kind = "callback" if self._callback else "message"
        return f"Pipe({kind}, chat={self.chat.id}, message={self.message_id})"

    # Read accessors

    @property
    def message(self) -> Message:
        return self._message

    @property
    def message_id(self) -> int:
        return self._message.id

    @property
    def text(self) -> str:
        """Raw message text."""
        return self._message.text

    @cached_property
    def command_descriptor(self) -> CommandDescriptor:
        return parse_command(self._message.text)

    @property
    def command(self) -> str:
        """Command token with its marker, e.g. "/start", or ""."""
        return self.command_descriptor.command

    @property
    def addressee(self) -> str:
        """Bot name after the separator in the command token, or ""."""
        return self.command_descriptor.addressee

    @property
    def text_without_command(self) -> str:
        return strip_command(self._message.text)

    @property
    def sender(self) -> User:
        return self._message.sender

    @property
    def chat(self) -> Chat:
        return self._message.chat

    @property
    def callback(self) -> Callback | None:
        return self._callback

    @property
    def callback_data(self) -> str:
        return self._callback.data if self._callback else ""

    @property
    def is_callback(self) -> bool:
        return self._callback is not None

    # Actions

    async def send_message(self, text: str, options: SendOptions | None = None) -> None:
        """Send text to the owning chat."""
        await self._transport.send_message(self.chat, text, embed_send_options(options))

    async def edit_message_text(
        self,
        text: str,
        options: SendOptions | None = None,
        message_id: int | None = None,
    ) -> None:
        """
        Replace the text of a message in the owning chat.

        Args:
            text: New text.
            options: Rendering options.
            message_id: Message to edit; defaults to this event's message
                (the message carrying the pressed button for callbacks).
        """
        target = self.message_id if message_id is None else message_id
        await self._transport.edit_message_text(
            self.chat,
            target,
            text,
            embed_send_options(options),
        )

    async def send_photo(self, photo: Photo, options: SendOptions | None = None) -> None:
        await self._transport.send_photo(self.chat, photo, embed_send_options(options))

    async def send_callback_answer(self, text: str, alert: bool = False) -> None:
        """Answer the pressed button. Message-only pipes are rejected by the transport."""
        await self._transport.answer_callback_query(
            self._callback,
            CallbackAnswer(text=text, show_alert=alert),
        )

    async def delete_message(self, message_id: int) -> None:
        await self._transport.delete_message(self.chat, message_id)

    async def send_typing(self) -> None:
        await self._transport.send_chat_action(self.chat, ChatAction.TYPING)
