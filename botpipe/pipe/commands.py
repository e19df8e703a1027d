"""
Command detection for incoming text.

A command is the first whitespace-delimited token of a message when the
message starts with the command marker. The token may name the bot it is
addressed to:

    /start            -> ("/start", "")
    /start@my_bot go  -> ("/start", "my_bot")
    hello /start      -> ("", "")
"""

from dataclasses import dataclass

COMMAND_MARKER = "/"
ADDRESSEE_SEPARATOR = "@"


@dataclass(frozen=True)
class CommandDescriptor:
    """A parsed (command, addressee) pair."""
    command: str = ""
    addressee: str = ""

    def __bool__(self) -> bool:
        return bool(self.command)

    def __iter__(self):
        yield self.command
        yield self.addressee


def _first_token(text: str) -> str:
    parts = text.split()
    return parts[0] if parts else ""


def parse_command(text: str | None) -> CommandDescriptor:
    """
    Extract the command and addressee from text.

    The marker stays part of the command. Anything malformed degrades to
    an empty descriptor; this never raises.

    Args:
        text: Raw message text.

    Returns:
        CommandDescriptor; unpacks as (command, addressee).
    """
    if not text or not text.startswith(COMMAND_MARKER):
        return CommandDescriptor()

    token = _first_token(text)
    if ADDRESSEE_SEPARATOR in token:
        command, addressee = token.split(ADDRESSEE_SEPARATOR, 1)
        return CommandDescriptor(command, addressee)

    return CommandDescriptor(token, "")


def strip_command(text: str | None) -> str:
    """
    Text with the leading command token (addressee included) removed.

    Examples:
        "/say@bot  hi there " -> "hi there"
        "just text "          -> "just text"
    """
    if not text:
        return ""
    if not text.startswith(COMMAND_MARKER):
        return text.strip()

    token = _first_token(text)
    return text.strip()[len(token):].strip()
