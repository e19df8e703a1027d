"""Base class for event handlers."""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from botpipe.bus.events import Query
from botpipe.pipe.pipe import Pipe


class Handler(ABC):
    """
    Abstract base class for handlers.

    A handler claims events through test() and then processes them with
    on_message() or on_callback(). Handlers are registered in order and
    the first one whose test() is true wins. Raising from on_message or
    on_callback sends an error reply to the chat.
    """

    @property
    def name(self) -> str:
        """Handler name used in logs."""
        return type(self).__name__

    @abstractmethod
    def test(self, pipe: Pipe) -> bool:
        """Return True if this handler should process the event."""
        pass

    @abstractmethod
    async def on_message(self, pipe: Pipe) -> None:
        """Process a text message."""
        pass

    @abstractmethod
    async def on_callback(self, pipe: Pipe) -> None:
        """Process a button press."""
        pass

    async def on_query(self, query: Query) -> None:
        """Process an inline query. Queries are not routed yet."""
        pass


PipeFunc = Callable[[Pipe], Awaitable[None]]


class CommandHandler(Handler):
    """
    Handler bound to one command, e.g. "/start".

    Messages match on the command token. Callbacks match when their button
    payload starts with callback_prefix (if one is given).

    Example:
        async def start(pipe):
            await pipe.send_message("Hi!")

        bot.add_handler(CommandHandler("/start", start))
    """

    def __init__(
        self,
        command: str,
        on_message: PipeFunc,
        on_callback: PipeFunc | None = None,
        callback_prefix: str | None = None,
    ):
        if not command.startswith("/"):
            command = "/" + command
        self.command = command
        self.callback_prefix = callback_prefix
        self._on_message = on_message
        self._on_callback = on_callback

    @property
    def name(self) -> str:
        return f"command:{self.command}"

    def test(self, pipe: Pipe) -> bool:
        if pipe.is_callback:
            if self.callback_prefix is None or self._on_callback is None:
                return False
            return pipe.callback_data.startswith(self.callback_prefix)
        return pipe.command == self.command

    async def on_message(self, pipe: Pipe) -> None:
        await self._on_message(pipe)

    async def on_callback(self, pipe: Pipe) -> None:
        if self._on_callback is not None:
            await self._on_callback(pipe)
