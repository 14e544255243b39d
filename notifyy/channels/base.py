"""Base channel interface for chat platforms."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from notifyy.core.models import ChatEvent, ChatId

type EventHandler = Callable[[ChatEvent], Awaitable[None]]


class BaseChannel(ABC):
    """
    Abstract base class for chat channel implementations.

    A channel is both the outbound send primitive and the source of inbound
    chat events, which it hands one at a time to ``on_event``.
    """

    name: str = "base"

    def __init__(self, on_event: EventHandler | None = None):
        """
        Initialize the channel.

        Args:
            on_event: Coroutine called for every inbound chat event.
        """
        self.on_event = on_event
        self._running = False

    @abstractmethod
    async def start(self) -> None:
        """
        Start the channel and begin listening for messages.

        This should be a long-running async task that:
        1. Connects to the chat platform
        2. Listens for incoming messages
        3. Forwards them via _handle_event()
        """
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Stop the channel and clean up resources."""
        pass

    @abstractmethod
    async def send(self, chat_id: ChatId, text: str) -> None:
        """
        Send a message through this channel.

        Args:
            chat_id: Destination chat.
            text: Message text in the channel's rich-text mode.
        """
        pass

    async def _handle_event(self, event: ChatEvent) -> None:
        if self.on_event is None:
            return
        await self.on_event(event)

    @property
    def is_running(self) -> bool:
        """Check if the channel is running."""
        return self._running
