"""
In-process transport.

Records every outbound call and lets the caller inject inbound events.
Useful for tests and for running handlers locally without a backend.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from botpipe.bus.events import (
    Callback,
    CallbackAnswer,
    Chat,
    ChatAction,
    Message,
    Photo,
    Query,
    SendOptions,
)
from botpipe.bus.queue import InboundQueues
from botpipe.errors import TransportError
from botpipe.transport.base import Transport


@dataclass
class OutboundCall:
    """One recorded transport call."""
    operation: str
    chat_id: int | None = None
    text: str = ""
    options: SendOptions | None = None
    payload: dict[str, Any] = field(default_factory=dict)


class MemoryTransport(Transport):
    """
    Transport that keeps everything in memory.

    - push_*() put inbound events on the queues once listen() is running
    - calls records every outbound operation in order
    - fail() makes an operation raise TransportError
    """

    name = "memory"

    def __init__(self):
        self.calls: list[OutboundCall] = []
        self._failures: dict[str, str] = {}
        self._queues: InboundQueues | None = None
        self._listening = asyncio.Event()

    def fail(self, operation: str, message: str = "backend unavailable") -> None:
        """Make an operation raise TransportError until recover() is called."""
        self._failures[operation] = message

    def recover(self, operation: str | None = None) -> None:
        """Clear one injected failure, or all of them."""
        if operation is None:
            self._failures.clear()
        else:
            self._failures.pop(operation, None)

    def calls_for(self, operation: str) -> list[OutboundCall]:
        return [c for c in self.calls if c.operation == operation]

    @property
    def sent_texts(self) -> list[str]:
        return [c.text for c in self.calls_for("send_message")]

    async def wait_listening(self) -> None:
        await self._listening.wait()

    # Inbound

    async def listen(self, queues: InboundQueues, poll_interval: float) -> None:
        self._queues = queues
        self._listening.set()
        logger.debug("Memory transport listening")
        try:
            await queues.stop.wait()
        finally:
            self._listening.clear()
            self._queues = None
            logger.debug("Memory transport stopped")

    def _require_queues(self) -> InboundQueues:
        if self._queues is None:
            raise RuntimeError("Memory transport is not listening")
        return self._queues

    async def push_message(self, message: Message) -> None:
        await self._require_queues().publish_message(message)

    async def push_callback(self, callback: Callback) -> None:
        await self._require_queues().publish_callback(callback)

    async def push_query(self, query: Query) -> None:
        await self._require_queues().publish_query(query)

    # Outbound

    def _record(self, call: OutboundCall) -> None:
        message = self._failures.get(call.operation)
        if message is not None:
            raise TransportError(call.operation, message)
        self.calls.append(call)

    async def send_message(self, chat: Chat, text: str, options: SendOptions) -> None:
        self._record(OutboundCall("send_message", chat.id, text, options))

    async def edit_message_text(
        self,
        chat: Chat,
        message_id: int,
        text: str,
        options: SendOptions,
    ) -> None:
        self._record(OutboundCall(
            "edit_message_text",
            chat.id,
            text,
            options,
            payload={"message_id": message_id},
        ))

    async def send_photo(self, chat: Chat, photo: Photo, options: SendOptions) -> None:
        self._record(OutboundCall(
            "send_photo",
            chat.id,
            photo.caption,
            options,
            payload={"photo": photo},
        ))

    async def answer_callback_query(
        self,
        callback: Callback | None,
        answer: CallbackAnswer,
    ) -> None:
        if callback is None:
            raise TransportError("answer_callback_query", "no callback to answer")
        self._record(OutboundCall(
            "answer_callback_query",
            callback.message.chat.id,
            answer.text,
            payload={"callback_id": callback.id, "show_alert": answer.show_alert},
        ))

    async def delete_message(self, chat: Chat, message_id: int) -> None:
        self._record(OutboundCall(
            "delete_message",
            chat.id,
            payload={"message_id": message_id},
        ))

    async def send_chat_action(self, chat: Chat, action: ChatAction) -> None:
        self._record(OutboundCall(
            "send_chat_action",
            chat.id,
            payload={"action": action},
        ))
