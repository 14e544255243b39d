"""Error taxonomy shared across notifyy components."""

from __future__ import annotations


class NotifyyError(Exception):
    """Base class for all notifyy errors."""


class ValidationError(NotifyyError):
    """Inbound request is missing required parameters."""


class ConfigurationError(NotifyyError):
    """Required settings are missing or invalid; fatal at startup."""


class PersistenceError(NotifyyError):
    """Remote recipient store read or write failed."""


class UpstreamDeliveryError(NotifyyError):
    """Bot gateway refused or failed to deliver a message."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
