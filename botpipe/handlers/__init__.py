"""
Handlers, routing and listener hooks.

- Handler / CommandHandler: predicate-matched units of work
- Router: first-match routing with error replies
- ListenerChain: pre-route gates and post-route observers
"""

from botpipe.handlers.base import CommandHandler, Handler
from botpipe.handlers.listeners import ListenerChain
from botpipe.handlers.router import Router

__all__ = ["CommandHandler", "Handler", "ListenerChain", "Router"]
