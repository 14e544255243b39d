"""In-memory recipient directory."""

from notifyy.directory.registry import RecipientDirectory

__all__ = ["RecipientDirectory"]
