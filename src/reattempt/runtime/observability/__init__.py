"""Observability: logging setup."""

from .logging import ConsoleFormatter, JsonFormatter, configure_logging

__all__ = ["ConsoleFormatter", "JsonFormatter", "configure_logging"]
