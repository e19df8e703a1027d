"""
botpipe - dispatch core for chat bots.

Normalizes messages and button callbacks from one transport into a Pipe
and routes each to the first matching handler.
"""

__version__ = "0.1.0"

from botpipe.bot.dispatcher import Bot
from botpipe.bus.events import (
    Callback,
    CallbackAnswer,
    Chat,
    ChatAction,
    Message,
    ParseMode,
    Photo,
    Query,
    SendOptions,
    User,
)
from botpipe.config.schema import BotConfig
from botpipe.errors import (
    BotAlreadyRunning,
    BotPipeError,
    HandlerFailure,
    InvalidConstruction,
    TransportError,
)
from botpipe.handlers.base import CommandHandler, Handler
from botpipe.pipe.pipe import Pipe
from botpipe.transport.base import Transport

__all__ = [
    "__version__",
    "Bot",
    "BotConfig",
    # Events
    "Callback",
    "CallbackAnswer",
    "Chat",
    "ChatAction",
    "Message",
    "ParseMode",
    "Photo",
    "Query",
    "SendOptions",
    "User",
    # Errors
    "BotAlreadyRunning",
    "BotPipeError",
    "HandlerFailure",
    "InvalidConstruction",
    "TransportError",
    # Routing
    "CommandHandler",
    "Handler",
    "Pipe",
    "Transport",
]
