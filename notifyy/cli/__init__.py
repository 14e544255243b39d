"""CLI module for notifyy."""
