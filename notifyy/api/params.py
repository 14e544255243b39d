"""Request parameter extraction for the /out endpoint.

Query-string values win; a JSON body of the same shape is the fallback.
A scalar parameter repeated in the query string (``title=a&title=b``)
resolves to its last occurrence; recipient parameters keep every value.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from starlette.datastructures import QueryParams

from notifyy.core.errors import ValidationError
from notifyy.core.models import NotificationRequest


def parse_json_body(raw: bytes) -> dict[str, Any]:
    """Decode a JSON object body; anything else counts as no body."""
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def build_request(
    query: QueryParams,
    body: Mapping[str, Any],
    *,
    allow_code: bool,
) -> NotificationRequest:
    """Validate and normalize one /out call.

    Raises:
        ValidationError: neither title nor message given, or no recipients.
    """
    title = _text(query, body, "title")
    message = _text(query, body, "message")
    if not title and not message:
        raise ValidationError("title or message is required")

    recipients = _recipients(query, body)
    if not recipients:
        raise ValidationError("users is required")

    return NotificationRequest(
        title=title,
        message=message,
        code=_text(query, body, "code") if allow_code else None,
        url=_text(query, body, "url"),
        recipients=recipients,
    )


def _text(query: QueryParams, body: Mapping[str, Any], key: str) -> str | None:
    value = query.get(key)
    if value:
        return value
    fallback = body.get(key)
    if fallback is None or isinstance(fallback, (dict, list)):
        return None
    return str(fallback) or None


def _recipients(query: QueryParams, body: Mapping[str, Any]) -> list[str]:
    for key in ("users", "user"):
        values = query.getlist(key) + query.getlist(f"{key}[]")
        tokens = _as_tokens(values)
        if tokens:
            return tokens
    for key in ("users", "user"):
        tokens = _as_tokens(body.get(key))
        if tokens:
            return tokens
    return []


def _as_tokens(value: Any) -> list[str]:
    # Legacy callers pass a single string.
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if isinstance(item, (str, int)) and str(item).strip()]
