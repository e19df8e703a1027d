"""Transports connect the dispatch core to a messaging backend."""

from botpipe.transport.base import Transport
from botpipe.transport.memory import MemoryTransport, OutboundCall

__all__ = ["Transport", "MemoryTransport", "OutboundCall"]
