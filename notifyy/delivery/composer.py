"""Outgoing message text composition (Telegram Markdown flavour)."""

from __future__ import annotations

import re

_ESCAPED_NEWLINE = re.compile(r"\\n")
_SMART_QUOTES = re.compile("[“”„″]")
_FENCE = "```"


def format_code(code: str) -> str:
    """Unescape literal ``\\n`` sequences and flatten curly double quotes."""
    code = _ESCAPED_NEWLINE.sub("\n", code)
    return _SMART_QUOTES.sub('"', code)


def compose_message(
    *,
    title: str | None = None,
    message: str | None = None,
    code: str | None = None,
    url: str | None = None,
) -> str:
    """Join the present parts with single newlines.

    >>> compose_message(title="Deploy", message="done", url="https://ci/1")
    '*Deploy*\\ndone\\nhttps://ci/1'
    """
    parts: list[str] = []
    if title:
        parts.append(f"*{title}*")
    if message:
        parts.append(message)
    if code:
        parts.append(f"{_FENCE}\n{format_code(code)}\n{_FENCE}")
    if url:
        parts.append(url)
    return "\n".join(parts)
