"""Typed core domain primitives."""

from notifyy.core.errors import (
    ConfigurationError,
    NotifyyError,
    PersistenceError,
    UpstreamDeliveryError,
    ValidationError,
)
from notifyy.core.models import ChatEvent, NotificationRequest, RecipientIdentity, SendRecord

__all__ = [
    "ChatEvent",
    "ConfigurationError",
    "NotificationRequest",
    "NotifyyError",
    "PersistenceError",
    "RecipientIdentity",
    "SendRecord",
    "UpstreamDeliveryError",
    "ValidationError",
]
