"""Enumerated types shared across the resolution pipeline.

All enums inherit from :class:`enum.StrEnum` so their ``.value`` is a
plain string that logs and JSON output render naturally.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Source selection
# ---------------------------------------------------------------------------


class SourceKind(StrEnum):
    NAMED = "named"
    URL = "url"
    PATH = "path"


# ---------------------------------------------------------------------------
# Local snapshot formats
# ---------------------------------------------------------------------------


class SnapshotFormat(StrEnum):
    JSON = "json"
    SNAPSHOT = "snapshot"
