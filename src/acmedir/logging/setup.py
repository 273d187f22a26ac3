"""Logging configuration for ACMEDIR.

Directory resolution logs with a small set of ``extra=`` fields:

``source_kind``
    ``named``, ``url`` or ``path``.
``service_name``
    Registry name, for named sources.
``directory_url``
    Directory or endpoint URL a request went to.
``snapshot_path``
    Local snapshot read or written.
``nonce``
    A nonce token.  Always masked before output.

:class:`StructuredFormatter` emits them as JSON keys;
:class:`TextFormatter` appends them as ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from acmedir.config.settings import LoggingSettings

# Everything a bare LogRecord carries; any other attribute came from ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}

CONTEXT_FIELDS = ("source_kind", "service_name", "directory_url", "snapshot_path")
MASKED_FIELDS = frozenset({"nonce"})

_VISIBLE_PREFIX = 6


def mask_token(token: object) -> str:
    """Return a log-safe prefix of a nonce token."""
    text = str(token)
    if len(text) <= _VISIBLE_PREFIX:
        return "***"
    return f"{text[:_VISIBLE_PREFIX]}..."


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the ``extra=`` fields of *record*, with tokens masked."""
    extras: dict[str, Any] = {}
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        extras[key] = mask_token(value) if key in MASKED_FIELDS else value
    return extras


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, extras included as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record_extras(record).items():
            data.setdefault(key, value)

        if record.exc_info and record.exc_info[0] is not None:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """Console formatter; directory context follows the message."""

    _FMT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

    def __init__(self) -> None:
        super().__init__(fmt=self._FMT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        pairs = [f"{key}={extras[key]}" for key in (*CONTEXT_FIELDS, "nonce") if key in extras]
        if not pairs:
            return line
        head, sep, tail = line.partition("\n")
        return f"{head} [{' '.join(pairs)}]{sep}{tail}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Configure the ``acmedir`` logger from the ``logging`` settings section.

    Replaces any earlier handlers with one stderr handler and stops
    propagation to the root logger.  Returns the ``acmedir`` logger.
    """
    level = getattr(logging, settings.level.upper(), logging.INFO)

    root = logging.getLogger("acmedir")
    root.setLevel(level)
    root.handlers.clear()
    root.propagate = False

    formatter: logging.Formatter
    formatter = StructuredFormatter() if settings.format == "json" else TextFormatter()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root.addHandler(console)

    return root
