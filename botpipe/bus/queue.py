"""
Inbound channels between the transport and the dispatch core.

Three small bounded queues (messages, callbacks, queries) and one shared
stop signal. A full queue makes the transport wait on put(), which is the
only backpressure the core applies.
"""

import asyncio

from botpipe.bus.events import Callback, Message, Query


class InboundQueues:
    """
    The three inbound channels plus the stop signal.

    The transport writes with publish_*(); the bot reads with next_*().
    """

    def __init__(self, maxsize: int = 1, stop: asyncio.Event | None = None):
        if maxsize < 1:
            raise ValueError("Queue size must be at least 1")

        self.messages: asyncio.Queue[Message] = asyncio.Queue(maxsize=maxsize)
        self.callbacks: asyncio.Queue[Callback] = asyncio.Queue(maxsize=maxsize)
        self.queries: asyncio.Queue[Query] = asyncio.Queue(maxsize=maxsize)
        # Shared with the owner when given
        self.stop = stop if stop is not None else asyncio.Event()

    @property
    def stopped(self) -> bool:
        return self.stop.is_set()

    async def publish_message(self, message: Message) -> None:
        await self.messages.put(message)

    async def publish_callback(self, callback: Callback) -> None:
        await self.callbacks.put(callback)

    async def publish_query(self, query: Query) -> None:
        await self.queries.put(query)

    async def next_item(self, queue: asyncio.Queue):
        """
        Wait for the next item on a queue, or for the stop signal.

        Args:
            queue: One of messages, callbacks or queries.

        Returns:
            The item, or None once stop is set. Items still queued when
            stop is set are not drained.
        """
        if self.stop.is_set():
            return None

        get_task = asyncio.ensure_future(queue.get())
        stop_task = asyncio.ensure_future(self.stop.wait())
        try:
            await asyncio.wait(
                {get_task, stop_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            stop_task.cancel()
            if not get_task.done():
                get_task.cancel()

        if get_task.done() and not get_task.cancelled():
            if self.stop.is_set():
                # Stop won the race; the item is dropped with the rest
                return None
            return get_task.result()
        return None

    def close(self) -> None:
        """Signal every reader and the transport to exit."""
        self.stop.set()
