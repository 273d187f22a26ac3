"""Directory loading: transport, local snapshots and the loader."""

from acmedir.directory.loader import load_directory, load_local, load_remote
from acmedir.directory.snapshot import (
    detect_format,
    dumps_snapshot,
    export_directory,
    loads_snapshot,
)
from acmedir.directory.transport import (
    HttpResponse,
    Transport,
    TransportError,
    UrllibTransport,
)

__all__ = [
    "HttpResponse",
    "Transport",
    "TransportError",
    "UrllibTransport",
    "detect_format",
    "dumps_snapshot",
    "export_directory",
    "load_directory",
    "load_local",
    "load_remote",
    "loads_snapshot",
]
