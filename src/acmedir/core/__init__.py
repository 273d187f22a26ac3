"""Core building blocks: enums, the endpoint registry and source selection."""

from acmedir.core.registry import (
    BUILTIN_SERVICES,
    DEFAULT_REGISTRY,
    DEFAULT_SERVICE,
    EndpointRegistry,
)
from acmedir.core.source import (
    DirectorySource,
    NamedSource,
    PathSource,
    ResolvedSource,
    UrlSource,
    resolve_source,
    select_source,
)
from acmedir.core.types import SnapshotFormat, SourceKind

__all__ = [
    "BUILTIN_SERVICES",
    "DEFAULT_REGISTRY",
    "DEFAULT_SERVICE",
    "DirectorySource",
    "EndpointRegistry",
    "NamedSource",
    "PathSource",
    "ResolvedSource",
    "SnapshotFormat",
    "SourceKind",
    "UrlSource",
    "resolve_source",
    "select_source",
]
