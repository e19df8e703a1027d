"""
Unified request handling.

- Command parsing ("/cmd@bot args")
- Pipe: one read/act handle per inbound event
"""

from botpipe.pipe.commands import CommandDescriptor, parse_command, strip_command
from botpipe.pipe.pipe import Pipe, embed_send_options

__all__ = [
    "CommandDescriptor",
    "parse_command",
    "strip_command",
    "Pipe",
    "embed_send_options",
]
