"""Configuration."""

from botpipe.config.schema import BotConfig

__all__ = ["BotConfig"]
