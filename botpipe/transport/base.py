"""Base class for bot transports."""

from abc import ABC, abstractmethod

from botpipe.bus.events import (
    Callback,
    CallbackAnswer,
    Chat,
    ChatAction,
    Photo,
    SendOptions,
)
from botpipe.bus.queue import InboundQueues


class Transport(ABC):
    """
    Abstract connection to a messaging backend.

    The dispatch core depends on exactly these operations. Serialization,
    polling, timeouts and retries belong to the implementation. Failed
    calls raise (TransportError is the recommended type).
    """

    name: str = "transport"

    @abstractmethod
    async def listen(self, queues: InboundQueues, poll_interval: float) -> None:
        """
        Deliver inbound events until queues.stop is set.

        Args:
            queues: Destination channels for messages, callbacks and queries.
            poll_interval: Seconds between polls, for polling backends.
        """
        pass

    @abstractmethod
    async def send_message(self, chat: Chat, text: str, options: SendOptions) -> None:
        """Send a text message to a chat."""
        pass

    @abstractmethod
    async def edit_message_text(
        self,
        chat: Chat,
        message_id: int,
        text: str,
        options: SendOptions,
    ) -> None:
        """Replace the text of an existing message."""
        pass

    @abstractmethod
    async def send_photo(self, chat: Chat, photo: Photo, options: SendOptions) -> None:
        """Send a photo to a chat."""
        pass

    @abstractmethod
    async def answer_callback_query(
        self,
        callback: Callback | None,
        answer: CallbackAnswer,
    ) -> None:
        """Acknowledge a button press. callback is None for message-only pipes."""
        pass

    @abstractmethod
    async def delete_message(self, chat: Chat, message_id: int) -> None:
        """Delete a message from a chat."""
        pass

    @abstractmethod
    async def send_chat_action(self, chat: Chat, action: ChatAction) -> None:
        """Show a presence hint such as "typing" in a chat."""
        pass
