"""Dispatch core."""

from botpipe.bot.dispatcher import Bot

__all__ = ["Bot"]
