"""Domain models for the notification relay."""

from __future__ import annotations

from dataclasses import dataclass, field

type Token = str
type ChatId = str


@dataclass(frozen=True, slots=True, kw_only=True)
class SendRecord:
    """One message actually dispatched to a recipient."""

    message: str
    sent_at: float


@dataclass(frozen=True, slots=True, kw_only=True)
class RecipientIdentity:
    """Chat destination plus display name, keyed by an access token."""

    chat_id: ChatId
    username: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ChatEvent:
    """Normalized inbound chat message from the bot gateway."""

    chat_id: ChatId
    username: str
    text: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class NotificationRequest:
    """Validated front-door input ready for composition and fan-out."""

    title: str | None = None
    message: str | None = None
    code: str | None = None
    url: str | None = None
    recipients: list[Token] = field(default_factory=list)
