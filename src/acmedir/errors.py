"""Error taxonomy for directory resolution.

Every failure raised while selecting a source, loading a directory or
activating ambient state derives from :class:`DirectoryError`.  Errors
are terminal for the invocation that raised them: nothing in this
package catches and suppresses them.

Usage::

    try:
        directory = get_service_directory(service_name="LetsEncrypt")
    except UnknownEndpoint as exc:
        print(exc.known_names)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from acmedir.core.types import SnapshotFormat


class DirectoryError(Exception):
    """Base class for all directory resolution failures.

    Parameters
    ----------
    detail:
        Human-readable description of the failure.

    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


# ---------------------------------------------------------------------------
# Source selection
# ---------------------------------------------------------------------------


class AmbiguousSource(DirectoryError):
    """The caller selected zero usable or several conflicting input modes."""


class UnknownEndpoint(DirectoryError):
    """A service name is not present in the endpoint registry.

    The message enumerates every registered name so the caller can
    correct the typo.
    """

    def __init__(self, name: str, known_names: Iterable[str]) -> None:
        self.name = name
        self.known_names = tuple(sorted(known_names))
        super().__init__(
            f"Unknown ACME service '{name}'; "
            f"known services: {', '.join(self.known_names)}",
        )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class DirectoryUnreachable(DirectoryError):
    """The directory URL could not be fetched (network, timeout, non-2xx)."""

    def __init__(
        self,
        url: str,
        reason: str,
        *,
        status: int | None = None,
    ) -> None:
        self.url = url
        self.status = status
        super().__init__(f"Failed to fetch ACME directory at {url}: {reason}")


class InvalidDirectoryDocument(DirectoryError):
    """A fetched directory body is not a JSON object."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"ACME directory at {url} is not valid: {reason}")


class SnapshotUnreadable(DirectoryError):
    """A local snapshot path does not exist or cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read directory snapshot '{path}': {reason}")


class MalformedSnapshot(DirectoryError):
    """A local snapshot cannot be parsed under its selected format."""

    def __init__(self, path: Path, fmt: SnapshotFormat, reason: str) -> None:
        self.path = path
        self.format = fmt
        super().__init__(
            f"Directory snapshot '{path}' is not a valid {fmt.value} snapshot: {reason}",
        )


# ---------------------------------------------------------------------------
# Activation
# ---------------------------------------------------------------------------


class MissingNonceEndpoint(DirectoryError):
    """Nonce activation was requested but the directory has no newNonce URL."""

    def __init__(self, resource_url: str | None = None) -> None:
        self.resource_url = resource_url
        origin = f" loaded from {resource_url}" if resource_url else ""
        super().__init__(
            f"ACME directory{origin} has no newNonce endpoint; cannot bootstrap a nonce",
        )


class NonceUnavailable(DirectoryError):
    """The newNonce endpoint did not yield a ``Replay-Nonce`` header."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"Failed to obtain a nonce from {url}: {reason}")


class DirectoryNotActivated(DirectoryError):
    """An endpoint was requested from ambient state but none is available."""
