"""Logging setup for reattempt.

Library modules log through stdlib loggers under the ``reattempt``
namespace and never install handlers themselves. Applications that want
the library's output call ``configure_logging`` once at startup.

Example:
    >>> configure_logging(format="text", level="DEBUG")
    >>> configure_logging(format="json")  # JSON lines for aggregation
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from reattempt.foundation.config import LoggingSettings, get_settings

ROOT_LOGGER = "reattempt"

# Attributes every LogRecord has; anything else came in through ``extra``
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def _extras(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED and not k.startswith("_")}


class ConsoleFormatter(logging.Formatter):
    """Human-readable output: ``timestamp [level] name: message key=value``."""
    
    def __init__(self, include_timestamps: bool = True) -> None:
        fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s" if include_timestamps else "[%(levelname)s] %(name)s: %(message)s"
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")
    
    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if extras := _extras(record):
            text += " " + " ".join(f"{k}={v!r}" for k, v in sorted(extras.items()))
        return text


class JsonFormatter(logging.Formatter):
    """JSON Lines output, one object per record."""
    
    def __init__(self, include_timestamps: bool = True) -> None:
        super().__init__()
        self.include_timestamps = include_timestamps
    
    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {"level": record.levelname, "logger": record.name, "event": record.getMessage()}
        if self.include_timestamps:
            data["timestamp"] = datetime.fromtimestamp(record.created, UTC).isoformat()
        data.update(_extras(record))
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(data, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    format: str | None = None,  # noqa: A002 - matches LoggingSettings.format
    level: str | None = None,
    *,
    output: TextIO | None = None,
    settings: LoggingSettings | None = None,
) -> logging.Handler:
    """Attach a single handler to the ``reattempt`` logger.
    
    Args:
        format: "text" or "json" (default: from settings)
        level: Minimum level name (default: from settings)
        output: Stream to write to (default: stderr)
        settings: LoggingSettings to read defaults from
    
    Returns:
        The installed handler. Calling again replaces it.
    """
    settings = settings or get_settings().logging
    fmt = format or settings.format
    if fmt not in ("text", "json"):
        raise ValueError(f"unknown log format {fmt!r}, expected 'text' or 'json'")
    
    root = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in root.handlers if getattr(h, "_reattempt", False)]:
        root.removeHandler(existing)
    
    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(
        JsonFormatter(settings.include_timestamps) if fmt == "json" else ConsoleFormatter(settings.include_timestamps)
    )
    handler._reattempt = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(getattr(logging, (level or settings.level).upper(), logging.INFO))
    return handler
