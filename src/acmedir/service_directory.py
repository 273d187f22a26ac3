"""Resolve an ACME service directory from a name, a URL or a snapshot.

This is the caller-facing operation.  It runs a fixed pipeline::

    select source -> resolve source -> load directory
        -> [publish directory] -> [bootstrap + publish nonce] -> return

Any failure before the directory is loaded aborts before activation;
the directory is returned whatever activation was requested.

Two entry points are provided:

- :class:`ServiceDirectoryClient` takes every collaborator (context,
  transport, registry, nonce client) explicitly.
- :func:`get_service_directory` is the convenience wrapper that uses
  the shared context from :func:`acmedir.state.get_context` and the
  loaded configuration, if any.

Usage::

    directory = get_service_directory(
        service_name="LetsEncrypt",
        activate_directory=True,
        activate_nonce=True,
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from acmedir.config import current_settings
from acmedir.core.registry import EndpointRegistry
from acmedir.core.source import resolve_source, select_source
from acmedir.directory.loader import load_directory
from acmedir.directory.transport import UrllibTransport
from acmedir.services.activation import activate
from acmedir.services.nonce import NonceClient
from acmedir.state.context import get_context

if TYPE_CHECKING:
    from pathlib import Path

    from acmedir.core.source import DirectorySource
    from acmedir.directory.transport import Transport
    from acmedir.models.directory import Directory
    from acmedir.state.context import AcmeContext

log = logging.getLogger(__name__)


def resolve_directory(
    source: DirectorySource,
    *,
    transport: Transport,
    registry: EndpointRegistry,
) -> Directory:
    """Resolve *source* and load its directory, without touching any state."""
    resolved = resolve_source(source, registry)
    location_field = "directory_url" if resolved.is_remote else "snapshot_path"
    log.debug(
        "Directory source resolved: %s -> %s",
        resolved.kind.value,
        resolved.location,
        extra={"source_kind": resolved.kind.value, location_field: str(resolved.location)},
    )
    return load_directory(resolved, transport)


class ServiceDirectoryClient:
    """Directory resolution bound to explicit collaborators.

    Parameters
    ----------
    context:
        Ambient state that activation writes to.
    transport:
        HTTP transport for directory and nonce requests.
    registry:
        Endpoint registry for named sources.
    nonce_client:
        Defaults to a :class:`NonceClient` over *transport*.

    """

    def __init__(
        self,
        context: AcmeContext,
        transport: Transport,
        registry: EndpointRegistry,
        nonce_client: NonceClient | None = None,
    ) -> None:
        self.context = context
        self.transport = transport
        self.registry = registry
        self.nonce_client = nonce_client or NonceClient(transport)

    def get(  # noqa: PLR0913
        self,
        *,
        service_name: str | None = None,
        directory_url: str | None = None,
        path: str | Path | None = None,
        activate_directory: bool = False,
        activate_nonce: bool = False,
    ) -> Directory:
        """Resolve, load and optionally activate a directory.

        At most one of *service_name*, *directory_url* and *path* may be
        given; with none, the registry's default service is used.

        Raises
        ------
        AmbiguousSource
            Conflicting or empty source arguments.
        UnknownEndpoint
            *service_name* is not registered.
        SnapshotUnreadable, MalformedSnapshot
            *path* cannot be read or decoded.
        DirectoryUnreachable, InvalidDirectoryDocument
            The remote directory cannot be fetched or decoded.
        MissingNonceEndpoint, NonceUnavailable
            Nonce activation failed.

        """
        source = select_source(
            service_name=service_name,
            directory_url=directory_url,
            path=path,
            default_service=self.registry.default_service,
        )
        directory = resolve_directory(
            source,
            transport=self.transport,
            registry=self.registry,
        )
        activate(
            directory,
            self.context,
            activate_directory=activate_directory,
            activate_nonce=activate_nonce,
            nonce_client=self.nonce_client,
        )
        return directory


def default_client(
    *,
    context: AcmeContext | None = None,
    transport: Transport | None = None,
    registry: EndpointRegistry | None = None,
    nonce_client: NonceClient | None = None,
) -> ServiceDirectoryClient:
    """Build a client from configuration, filling in anything not given."""
    settings = current_settings()
    if registry is None:
        registry = EndpointRegistry.from_settings(settings.services)
    if transport is None:
        transport = UrllibTransport(settings.transport)
    return ServiceDirectoryClient(
        context if context is not None else get_context(),
        transport,
        registry,
        nonce_client,
    )


def get_service_directory(  # noqa: PLR0913
    *,
    service_name: str | None = None,
    directory_url: str | None = None,
    path: str | Path | None = None,
    activate_directory: bool = False,
    activate_nonce: bool = False,
    context: AcmeContext | None = None,
    transport: Transport | None = None,
    registry: EndpointRegistry | None = None,
    nonce_client: NonceClient | None = None,
) -> Directory:
    """Resolve an ACME directory, publishing into the shared context on request.

    See :meth:`ServiceDirectoryClient.get` for the source arguments and
    raised errors.  Collaborators that are not passed come from the
    loaded configuration (or built-in defaults) and the shared context.
    """
    client = default_client(
        context=context,
        transport=transport,
        registry=registry,
        nonce_client=nonce_client,
    )
    return client.get(
        service_name=service_name,
        directory_url=directory_url,
        path=path,
        activate_directory=activate_directory,
        activate_nonce=activate_nonce,
    )
