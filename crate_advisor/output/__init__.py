"""Output formatting for crate-advisor."""

from .formatters import ConsoleFormatter, JSONFormatter

__all__ = ["ConsoleFormatter", "JSONFormatter"]
