"""Token → recipient identity directory.

Read on every delivery request, written only by the registration flow.
Writes add new keys; existing entries are never mutated or removed.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator, Mapping

from loguru import logger

from notifyy.core.models import RecipientIdentity, Token


def mint_token() -> Token:
    """Return a fresh opaque access token."""
    return uuid.uuid4().hex


class RecipientDirectory:
    """Process-lifetime mapping of access tokens to chat recipients."""

    def __init__(self, entries: Mapping[Token, RecipientIdentity] | None = None) -> None:
        self._entries: dict[Token, RecipientIdentity] = dict(entries or {})

    def lookup(self, token: Token) -> RecipientIdentity | None:
        return self._entries.get(token)

    def token_for(self, identity: RecipientIdentity) -> Token | None:
        """Return the token already issued to this display identity, if any.

        Chats without a username are matched on their chat id instead, so two
        anonymous chats never share a token.
        """
        for token, known in self._entries.items():
            if identity.username:
                if known.username == identity.username:
                    return token
            elif not known.username and known.chat_id == identity.chat_id:
                return token
        return None

    def add(self, token: Token, identity: RecipientIdentity) -> bool:
        """Store a new entry. Returns False when ``token`` is already taken."""
        if token in self._entries:
            return False
        self._entries[token] = identity
        return True

    def merge(self, entries: Mapping[Token, RecipientIdentity]) -> int:
        """Add loaded entries without overriding ones registered meanwhile."""
        added = 0
        for token, identity in entries.items():
            if self.add(token, identity):
                added += 1
        logger.info(f"Recipient directory merged {added} entries ({len(self)} total)")
        return added

    def reset(self) -> None:
        self._entries.clear()

    def __contains__(self, token: object) -> bool:
        return token in self._entries

    def __iter__(self) -> Iterator[Token]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
