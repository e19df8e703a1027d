"""Exception types for botpipe."""


class BotPipeError(Exception):
    """Base class for all botpipe errors."""


class InvalidConstruction(BotPipeError, ValueError):
    """A Pipe was built without an event or without a transport."""


class HandlerFailure(BotPipeError):
    """A matched handler raised while processing an event."""

    def __init__(self, handler: object, cause: BaseException):
        self.handler = handler
        self.cause = cause
        super().__init__(str(cause))

    @property
    def handler_name(self) -> str:
        return getattr(self.handler, "name", type(self.handler).__name__)


class TransportError(BotPipeError):
    """A transport call (send, edit, delete, answer) failed."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class BotAlreadyRunning(BotPipeError, RuntimeError):
    """Registries are frozen once the bot has started."""
