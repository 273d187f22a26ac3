"""Ambient protocol state: the active directory and the current nonce.

:class:`AcmeContext` is an explicit object that later protocol calls
receive.  A shared process-wide instance exists for callers that want
the ambient convenience; it is reached with :func:`get_context`.
Nothing here locks: activation is expected to run from a single
thread, before the protocol calls that read it.

Usage::

    ctx = AcmeContext()
    ctx.publish_directory(directory)
    ctx.endpoint("new_order")                 # from the directory
    ctx.endpoint("new_order", explicit=url)   # explicit value wins

    from acmedir.state.context import get_context
    get_context().nonce
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from acmedir.errors import DirectoryNotActivated
from acmedir.logging.setup import mask_token

if TYPE_CHECKING:
    from acmedir.models.directory import Directory

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NonceState:
    """The current anti-replay token and the URL that refreshes it."""

    token: str
    refresh_url: str

    def __repr__(self) -> str:
        return f"NonceState(token={mask_token(self.token)!r}, refresh_url={self.refresh_url!r})"


class AcmeContext:
    """Holds at most one directory and one nonce state.

    Each publish overwrites the previous value; there is no merging
    or stacking.
    """

    def __init__(
        self,
        directory: Directory | None = None,
        nonce: NonceState | None = None,
    ) -> None:
        self._directory = directory
        self._nonce = nonce

    # -- directory ----------------------------------------------------------

    @property
    def directory(self) -> Directory | None:
        """The published directory, or ``None``."""
        return self._directory

    def publish_directory(self, directory: Directory) -> None:
        """Make *directory* the ambient directory, replacing any previous one."""
        self._directory = directory
        log.info(
            "Activated ACME directory %s",
            directory.resource_url or "(local snapshot)",
            extra={"directory_url": directory.resource_url},
        )

    def endpoint(self, name: str, explicit: str | None = None) -> str:
        """Return the URL for a directory endpoint.

        An *explicit* value always wins.  Otherwise the ambient
        directory's field is used.

        Raises
        ------
        DirectoryNotActivated
            If neither an explicit value nor an ambient directory
            providing *name* is available.

        """
        if explicit:
            return explicit
        if self._directory is None:
            msg = f"No ACME directory is active; pass '{name}' explicitly"
            raise DirectoryNotActivated(msg)
        url = self._directory.endpoint(name)
        if url is None:
            msg = f"The active ACME directory does not provide '{name}'"
            raise DirectoryNotActivated(msg)
        return url

    # -- nonce --------------------------------------------------------------

    @property
    def nonce(self) -> NonceState | None:
        """The current nonce state, or ``None``."""
        return self._nonce

    def publish_nonce(self, token: str, refresh_url: str) -> None:
        """Store a freshly bootstrapped nonce and its refresh URL."""
        self._nonce = NonceState(token=token, refresh_url=refresh_url)
        log.info(
            "Activated ACME nonce from %s",
            refresh_url,
            extra={"nonce": token, "directory_url": refresh_url},
        )

    def update_nonce(self, token: str) -> None:
        """Replace the token after a protocol response carried a new one.

        Raises
        ------
        DirectoryNotActivated
            If no nonce state was published yet.

        """
        if self._nonce is None:
            msg = "No ACME nonce is active; bootstrap one before updating it"
            raise DirectoryNotActivated(msg)
        self._nonce = replace(self._nonce, token=token)
        log.debug("Updated ACME nonce", extra={"nonce": token})

    # -- lifecycle ----------------------------------------------------------

    def clear(self) -> None:
        """Forget both the directory and the nonce."""
        self._directory = None
        self._nonce = None

    def __repr__(self) -> str:
        active = self._directory.resource_url if self._directory else None
        return f"<AcmeContext directory={active!r} nonce={self._nonce!r}>"


# ---------------------------------------------------------------------------
# Shared instance
# ---------------------------------------------------------------------------
_shared: AcmeContext = AcmeContext()


def get_context() -> AcmeContext:
    """Return the shared process-wide context."""
    return _shared


def set_context(context: AcmeContext) -> AcmeContext:
    """Install *context* as the shared context and return the previous one."""
    global _shared  # noqa: PLW0603
    previous, _shared = _shared, context
    return previous


def reset_context() -> None:
    """Replace the shared context with an empty one -- testing only."""
    set_context(AcmeContext())
