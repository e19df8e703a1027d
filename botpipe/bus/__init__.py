"""Inbound events and the queues that carry them."""

from botpipe.bus.events import Callback, InboundEvent, Message, Query
from botpipe.bus.queue import InboundQueues

__all__ = ["Callback", "InboundEvent", "Message", "Query", "InboundQueues"]
