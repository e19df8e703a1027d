"""
Handler registry and routing.

Routes a pipe to the first registered handler whose test() matches:
- Registration order is match order
- "typing" is shown before the handler runs
- Handler errors are logged and reported back into the chat
"""

from typing import Any

from loguru import logger as default_logger

from botpipe.errors import BotAlreadyRunning, HandlerFailure
from botpipe.handlers.base import Handler
from botpipe.pipe.pipe import Pipe

ERROR_REPLY_PREFIX = "Error - "


class Router:
    """
    Append-only list of handlers plus the routing ground rule.

    route() never raises: a missing route is logged, handler failures are
    logged and answered with an error reply, and failures of the typing
    hint or of the error reply itself are swallowed.
    """

    def __init__(self, handlers: tuple[Handler, ...] = (), logger: Any = None):
        self._handlers: list[Handler] = list(handlers)
        self._frozen = False
        self.logger = logger or default_logger

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return tuple(self._handlers)

    def add_handler(self, handler: Handler) -> None:
        if self._frozen:
            raise BotAlreadyRunning("Cannot add handlers after dispatch has started")
        self._handlers.append(handler)
        self.logger.debug(f"Handler registered: {handler.name}")

    def snapshot(self, logger: Any = None) -> "Router":
        """Frozen copy of this router for use during dispatch."""
        router = Router(tuple(self._handlers), logger=logger or self.logger)
        router._frozen = True
        return router

    def find_handler(self, pipe: Pipe) -> Handler | None:
        for handler in self._handlers:
            if handler.test(pipe):
                return handler
        return None

    async def route(self, pipe: Pipe) -> Handler | None:
        """
        Dispatch a pipe to its handler.

        Args:
            pipe: The request for one event.

        Returns:
            The handler that ran, or None when nothing matched.
        """
        self.logger.trace("Route is invoked")

        try:
            handler = self.find_handler(pipe)
        except Exception as e:
            self.logger.error(f"Handler test failed for message {pipe.message_id} - {e}")
            return None

        if handler is None:
            self.logger.info(f"Undefined route for message {pipe.message_id}")
            return None

        self.logger.trace(f"Handler is found: {handler.name}")

        try:
            await pipe.send_typing()
        except Exception as e:
            self.logger.debug(f"Typing hint failed: {e}")

        try:
            if pipe.callback is not None:
                self.logger.trace("On callback event")
                await handler.on_callback(pipe)
            else:
                self.logger.trace("On message event")
                await handler.on_message(pipe)
        except Exception as e:
            failure = HandlerFailure(handler, e)
            self.logger.error(f"Error occurred in {failure.handler_name} - {failure}")
            await self._send_error_reply(pipe, failure)

        return handler

    async def _send_error_reply(self, pipe: Pipe, failure: HandlerFailure) -> None:
        try:
            await pipe.send_message(ERROR_REPLY_PREFIX + str(failure.cause))
        except Exception as e:
            self.logger.debug(f"Error reply failed: {e}")
