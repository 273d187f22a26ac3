"""ACMEDIR - ACME service directory resolution.

Public API::

    from acmedir import get_service_directory

    directory = get_service_directory(service_name="LetsEncrypt")
    directory.new_order      # "https://acme-v02.api.letsencrypt.org/acme/new-order"
"""

__version__ = "1.0.0"

from acmedir.errors import (  # noqa: E402
    AmbiguousSource,
    DirectoryError,
    DirectoryNotActivated,
    DirectoryUnreachable,
    InvalidDirectoryDocument,
    MalformedSnapshot,
    MissingNonceEndpoint,
    NonceUnavailable,
    SnapshotUnreadable,
    UnknownEndpoint,
)
from acmedir.models.directory import Directory, DirectoryMeta  # noqa: E402
from acmedir.service_directory import (  # noqa: E402
    ServiceDirectoryClient,
    get_service_directory,
    resolve_directory,
)

__all__ = [
    "AmbiguousSource",
    "Directory",
    "DirectoryError",
    "DirectoryMeta",
    "DirectoryNotActivated",
    "DirectoryUnreachable",
    "InvalidDirectoryDocument",
    "MalformedSnapshot",
    "MissingNonceEndpoint",
    "NonceUnavailable",
    "ServiceDirectoryClient",
    "SnapshotUnreadable",
    "UnknownEndpoint",
    "__version__",
    "get_service_directory",
    "resolve_directory",
]
