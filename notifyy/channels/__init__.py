"""Chat channel implementations."""

from notifyy.channels.base import BaseChannel
from notifyy.channels.telegram import TelegramChannel

__all__ = ["BaseChannel", "TelegramChannel"]
