"""notifyy - relay HTTP notifications to Telegram chats."""

__version__ = "0.3.0"
__logo__ = "📣"
