"""Directory source selection and resolution.

The caller picks exactly one of three sources.  :func:`select_source`
turns the mutually exclusive keyword arguments into a tagged variant
once, at the boundary; :func:`resolve_source` then turns the variant
into a :class:`ResolvedSource` carrying either a directory URL or a
local file path.  Neither function performs network I/O, so a bad
selection fails before any request is made.

Usage::

    source = select_source(service_name="LetsEncrypt")
    resolved = resolve_source(source, DEFAULT_REGISTRY)
    resolved.location  # "https://acme-v02.api.letsencrypt.org/directory"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from acmedir.core.registry import DEFAULT_REGISTRY
from acmedir.core.types import SourceKind
from acmedir.errors import AmbiguousSource, SnapshotUnreadable

if TYPE_CHECKING:
    from acmedir.core.registry import EndpointRegistry

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tagged variant
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NamedSource:
    """A well-known service name looked up in the endpoint registry."""

    kind: ClassVar[SourceKind] = SourceKind.NAMED
    service_name: str


@dataclass(frozen=True)
class UrlSource:
    """An explicit directory URL, used verbatim."""

    kind: ClassVar[SourceKind] = SourceKind.URL
    directory_url: str


@dataclass(frozen=True)
class PathSource:
    """A previously exported local snapshot."""

    kind: ClassVar[SourceKind] = SourceKind.PATH
    path: Path


DirectorySource = NamedSource | UrlSource | PathSource


@dataclass(frozen=True)
class ResolvedSource:
    """Outcome of source resolution, tagged with the branch that produced it.

    Attributes
    ----------
    kind:
        Which input mode produced this source.
    location:
        Directory URL for ``NAMED``/``URL``, a :class:`~pathlib.Path`
        for ``PATH``.
    service_name:
        The registry name, for ``NAMED`` sources only.

    """

    kind: SourceKind
    location: str | Path
    service_name: str | None = field(default=None)

    @property
    def is_remote(self) -> bool:
        return self.kind is not SourceKind.PATH


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def select_source(
    *,
    service_name: str | None = None,
    directory_url: str | None = None,
    path: str | Path | None = None,
    default_service: str | None = None,
) -> DirectorySource:
    """Build the source variant from mutually exclusive arguments.

    Parameters
    ----------
    service_name:
        Registry name (e.g. ``"LetsEncrypt"``).
    directory_url:
        Full directory URL.
    path:
        Local snapshot file.
    default_service:
        Name used when nothing is supplied; defaults to the built-in
        registry default.

    Raises
    ------
    AmbiguousSource
        If more than one argument is supplied or one is an empty string.

    """
    supplied = {
        name: value
        for name, value in (
            ("service_name", service_name),
            ("directory_url", directory_url),
            ("path", path),
        )
        if value is not None
    }

    if len(supplied) > 1:
        msg = (
            "Only one directory source may be given; "
            f"got {', '.join(sorted(supplied))}"
        )
        raise AmbiguousSource(msg)

    for name, value in supplied.items():
        # Path("") normalises to "."
        text = "" if isinstance(value, Path) and str(value) == "." else str(value)
        if not text.strip():
            msg = f"Directory source '{name}' must not be empty"
            raise AmbiguousSource(msg)

    if directory_url is not None:
        return UrlSource(directory_url)
    if path is not None:
        return PathSource(Path(path))
    if service_name is not None:
        return NamedSource(service_name)
    return NamedSource(default_service or DEFAULT_REGISTRY.default_service)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_source(
    source: DirectorySource,
    registry: EndpointRegistry = DEFAULT_REGISTRY,
) -> ResolvedSource:
    """Turn a source variant into a directory URL or a readable file path.

    Raises
    ------
    UnknownEndpoint
        If a named source is not registered.
    SnapshotUnreadable
        If a path source does not name an existing regular file.

    """
    if isinstance(source, NamedSource):
        url = registry.directory_url(source.service_name)
        log.debug(
            "Resolved ACME service %s to %s",
            source.service_name,
            url,
            extra={"service_name": source.service_name, "directory_url": url},
        )
        return ResolvedSource(
            SourceKind.NAMED,
            url,
            service_name=source.service_name,
        )
    if isinstance(source, UrlSource):
        return ResolvedSource(SourceKind.URL, source.directory_url)
    if isinstance(source, PathSource):
        path = source.path
        if not path.exists():
            raise SnapshotUnreadable(path, "file does not exist")
        if not path.is_file():
            raise SnapshotUnreadable(path, "not a regular file")
        return ResolvedSource(SourceKind.PATH, path)
    msg = f"Unsupported directory source {source!r}"
    raise TypeError(msg)
