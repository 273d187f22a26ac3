"""Directory loader: fetch or read a directory and normalise it.

Remote directories are fetched with a single ``GET``; there is no
retry.  Local snapshots are read once and decoded under the format
chosen by :func:`~acmedir.directory.snapshot.detect_format`.  Either
way the result is one :class:`~acmedir.models.directory.Directory`.

Usage::

    directory = load_remote("https://acme.example.com/directory", transport)
    directory = load_local(Path("saved.json"))
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from acmedir.core.types import SnapshotFormat, SourceKind
from acmedir.directory.snapshot import detect_format, loads_json, loads_snapshot
from acmedir.directory.transport import TransportError
from acmedir.errors import (
    DirectoryUnreachable,
    InvalidDirectoryDocument,
    MalformedSnapshot,
    SnapshotUnreadable,
)
from acmedir.models.directory import Directory

if TYPE_CHECKING:
    from pathlib import Path

    from acmedir.core.source import ResolvedSource
    from acmedir.directory.transport import Transport

log = logging.getLogger(__name__)

_BODY_EXCERPT = 200


def load_remote(url: str, transport: Transport) -> Directory:
    """Fetch and decode the directory at *url*.

    Raises
    ------
    DirectoryUnreachable
        On network failure, timeout, or a non-2xx status.
    InvalidDirectoryDocument
        If the body is not a JSON object.

    """
    log.info("Fetching ACME directory from %s", url, extra={"directory_url": url})
    try:
        resp = transport.get(url)
    except TransportError as exc:
        raise DirectoryUnreachable(url, exc.reason) from exc

    if not resp.ok:
        excerpt = resp.body[:_BODY_EXCERPT].decode("utf-8", errors="replace")
        reason = f"HTTP {resp.status}"
        if excerpt:
            reason = f"{reason}: {excerpt}"
        raise DirectoryUnreachable(url, reason, status=resp.status)

    try:
        data = json.loads(resp.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidDirectoryDocument(url, f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidDirectoryDocument(
            url,
            f"expected a JSON object, got {type(data).__name__}",
        )

    directory = Directory.from_dict(data, resource_url=url)
    log.debug("Loaded ACME directory from %s", url, extra={"directory_url": url})
    return directory


def load_local(path: Path) -> Directory:
    """Read and decode a local snapshot, branching on its suffix.

    Raises
    ------
    SnapshotUnreadable
        If the file cannot be read.
    MalformedSnapshot
        If the content does not parse under the selected format.

    """
    fmt = detect_format(path)
    log.info(
        "Loading ACME directory snapshot %s (%s)",
        path,
        fmt.value,
        extra={"snapshot_path": str(path)},
    )
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SnapshotUnreadable(path, exc.strerror or str(exc)) from exc

    decode = loads_json if fmt is SnapshotFormat.JSON else loads_snapshot
    try:
        return decode(raw)
    except ValueError as exc:
        raise MalformedSnapshot(path, fmt, str(exc)) from exc


def load_directory(resolved: ResolvedSource, transport: Transport) -> Directory:
    """Load the directory named by a resolved source."""
    if resolved.kind is SourceKind.PATH:
        return load_local(resolved.location)  # type: ignore[arg-type]
    return load_remote(str(resolved.location), transport)
