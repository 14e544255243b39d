"""Configuration module for notifyy."""

from notifyy.config.loader import load_settings
from notifyy.config.schema import Settings

__all__ = ["Settings", "load_settings"]
