"""
Dispatch core.

Reads the three inbound channels and runs every event in its own task:

    transport -> queue -> reader -> new task per event
        -> Pipe -> bot-name filter -> pre-listeners -> router -> post-listeners

Failures stay inside the event's task and are only logged, so one bad
event never stalls the readers.
"""

import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger as default_logger

from botpipe.bus.events import Callback, Message, Query
from botpipe.bus.queue import InboundQueues
from botpipe.config.schema import BotConfig
from botpipe.errors import BotAlreadyRunning, InvalidConstruction
from botpipe.handlers.base import Handler
from botpipe.handlers.listeners import ListenerChain, PostListener, PreListener
from botpipe.handlers.router import Router
from botpipe.pipe.pipe import Pipe
from botpipe.transport.base import Transport
from botpipe.utils.logging import reset_event_id, set_event_id


class Bot:
    """
    Dispatch core for one bot.

    Usage:
        bot = Bot(transport, bot_name="my_bot", filter_by_bot_name=True)
        bot.add_handler(CommandHandler("/start", start))
        bot.add_pre_listener(only_private_chats)
        task = asyncio.create_task(bot.start())
        ...
        bot.stop()
        await task

    Handlers and listeners must be registered before start(); the
    registries are frozen when dispatch begins.
    """

    def __init__(
        self,
        transport: Transport,
        config: BotConfig | None = None,
        *,
        bot_name: str | None = None,
        filter_by_bot_name: bool | None = None,
        logger: Any = None,
    ):
        """
        Args:
            transport: Connection to the messaging backend.
            config: Full configuration; bot_name and filter_by_bot_name
                override its values when given.
            bot_name: Name matched against "/cmd@name" addressees.
            filter_by_bot_name: Ignore commands addressed to other bots.
            logger: Loguru-compatible logger; defaults to loguru's logger
                bound with this bot's name.
        """
        if transport is None:
            raise ValueError("nil transport given")

        overrides: dict[str, Any] = {}
        if bot_name is not None:
            overrides["bot_name"] = bot_name
        if filter_by_bot_name is not None:
            overrides["filter_by_bot_name"] = filter_by_bot_name

        if config is None:
            # bot_name may also come from BOTPIPE_BOT_NAME
            config = BotConfig(**overrides)
        elif overrides:
            config = BotConfig(**{**config.model_dump(), **overrides})

        self.config = config
        self.transport = transport
        self.logger = logger or default_logger.bind(bot=config.bot_name)

        self.router = Router(logger=self.logger)
        self.listeners = ListenerChain(logger=self.logger)

        # Frozen copies used while dispatching
        self._active_router: Router | None = None
        self._active_listeners: ListenerChain | None = None

        # Set by stop(); a stop sent before start() ends the next run at once
        self._stop = asyncio.Event()
        self._queues: InboundQueues | None = None
        self._semaphore: asyncio.Semaphore | None = None
        self._inflight: set[asyncio.Task] = set()
        self._running = False

        # Stats
        self._processed_count = 0
        self._dropped_count = 0

    @property
    def name(self) -> str:
        return self.config.bot_name

    @property
    def running(self) -> bool:
        return self._running

    @property
    def queues(self) -> InboundQueues | None:
        return self._queues

    @property
    def inflight(self) -> int:
        """Number of event tasks not yet finished."""
        return len(self._inflight)

    # Registration

    def _check_not_started(self) -> None:
        if self._active_router is not None:
            raise BotAlreadyRunning("Cannot register after dispatch has started")

    def add_handler(self, handler: Handler) -> None:
        self._check_not_started()
        self.router.add_handler(handler)

    def add_pre_listener(self, *fns: PreListener) -> None:
        self._check_not_started()
        self.listeners.add_pre_listener(*fns)

    def add_post_listener(self, *fns: PostListener) -> None:
        self._check_not_started()
        self.listeners.add_post_listener(*fns)

    # Per-event processing

    def _skip_by_bot_name(self, pipe: Pipe) -> bool:
        if not self.config.filter_by_bot_name:
            return False
        addressee = pipe.addressee
        return bool(addressee) and addressee != self.config.bot_name

    async def on_incoming_message(self, message: Message) -> None:
        """Process one message. Never raises."""
        await self._process(message, "message")

    async def on_incoming_callback(self, callback: Callback) -> None:
        """Process one button press. Never raises."""
        await self._process(callback, "callback")

    async def on_incoming_query(self, query: Query) -> None:
        """Queries are acknowledged but not routed."""
        self.logger.trace(f"Received query {query.id} from {query.sender.id}")

    async def _process(self, event: Message | Callback, kind: str) -> None:
        event_id = f"{kind}:{getattr(event, 'id', None)}"
        token = set_event_id(event_id)
        try:
            sender = getattr(getattr(event, "sender", None), "id", None)
            self.logger.trace(f"Received {kind} {getattr(event, 'id', None)} from {sender}")
            await self._process_event(event)
        except Exception as e:
            self.logger.exception(f"Unexpected error while processing {event_id} - {e}")
        finally:
            reset_event_id(token)

    async def _process_event(self, event: Message | Callback) -> None:
        router = self._active_router or self.router
        listeners = self._active_listeners or self.listeners

        try:
            pipe = Pipe(event, self.transport)
        except InvalidConstruction as e:
            self.logger.error(f"Unable to build pipe - {e}")
            self._dropped_count += 1
            return

        if self._skip_by_bot_name(pipe):
            self.logger.trace(f"Skip by bot name: {pipe.addressee}")
            self._dropped_count += 1
            return

        if not await listeners.run_pre(pipe):
            return

        await router.route(pipe)
        self._processed_count += 1
        self.logger.trace(f"Message {pipe.message_id} is processed")

        await listeners.run_post(pipe)

    # Fan-out

    def _spawn(self, work: Awaitable[None]) -> asyncio.Task:
        task = asyncio.create_task(self._bounded(work))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _bounded(self, work: Awaitable[None]) -> None:
        if self._semaphore is None:
            await work
            return
        async with self._semaphore:
            await work

    async def _read(
        self,
        queue: asyncio.Queue,
        kind: str,
        on_item: Callable[[Any], Awaitable[None]],
    ) -> None:
        """Hand every item to a new task until stop is signalled."""
        while True:
            item = await self._queues.next_item(queue)
            if item is None:
                self.logger.debug(f"Stopped reading {kind}")
                return
            self.logger.trace(f"Received {kind} item - {item.id}")
            self._spawn(on_item(item))

    async def _listen(self, poll_interval: float) -> None:
        try:
            await self.transport.listen(self._queues, poll_interval)
        except Exception as e:
            self.logger.error(f"Transport {self.transport.name} failed - {e}")
        finally:
            if not self._queues.stopped:
                self.logger.warning(f"Transport {self.transport.name} stopped listening")
                self._queues.close()

    async def start(self, poll_interval: float | None = None) -> None:
        """
        Run the dispatch loop until stop() is called.

        Args:
            poll_interval: Seconds between transport polls; defaults to
                config.poll_interval.
        """
        if self._running:
            raise BotAlreadyRunning(f"Bot {self.name} is already running")
        if self._stop.is_set():
            self._stop = asyncio.Event()
            self.logger.info(f"Bot {self.name} was stopped before starting")
            return
        self._running = True

        if poll_interval is None:
            poll_interval = self.config.poll_interval

        self._active_router = self.router.snapshot(self.logger)
        self._active_listeners = self.listeners.snapshot(self.logger)
        self._queues = InboundQueues(maxsize=self.config.queue_size, stop=self._stop)
        if self.config.max_concurrency:
            self._semaphore = asyncio.Semaphore(self.config.max_concurrency)

        self.logger.info(
            f"Bot {self.name} started with {len(self._active_router.handlers)} handlers"
        )

        try:
            await asyncio.gather(
                self._listen(poll_interval),
                self._read(self._queues.messages, "message", self.on_incoming_message),
                self._read(self._queues.callbacks, "callback", self.on_incoming_callback),
                self._read(self._queues.queries, "query", self.on_incoming_query),
            )
        finally:
            self._queues.close()
            # Fresh signal and open registries for a later run
            self._stop = asyncio.Event()
            self._active_router = None
            self._active_listeners = None
            self._running = False
            self.logger.info(f"Bot {self.name} stopped, {self.inflight} events in flight")

    def stop(self) -> None:
        """
        Signal the readers and the transport to exit.

        Safe to call before start() has begun running; that run then
        returns at once. Events already handed to their own task are not
        cancelled.
        """
        self._stop.set()
        self.logger.info(f"Stopping bot {self.name}")

    async def wait_inflight(self) -> None:
        """Wait for event tasks spawned before now to finish."""
        if self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    def get_stats(self) -> dict[str, Any]:
        return {
            "bot_name": self.name,
            "running": self._running,
            "handlers": len(self.router.handlers),
            "processed_count": self._processed_count,
            "dropped_count": self._dropped_count,
            "inflight": self.inflight,
        }
