"""Endpoint registry: well-known ACME service names and their base URLs.

The built-in table is fixed at import time.  Deployments can add
their own names through the ``services`` configuration section, which
builds a *new* registry with :meth:`EndpointRegistry.extended`; the
built-in instance is never mutated.

Usage::

    from acmedir.core.registry import DEFAULT_REGISTRY

    DEFAULT_REGISTRY.lookup("LetsEncrypt")
    # "https://acme-v02.api.letsencrypt.org"
    DEFAULT_REGISTRY.directory_url("LetsEncrypt")
    # "https://acme-v02.api.letsencrypt.org/directory"
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from acmedir.errors import UnknownEndpoint

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from acmedir.config.settings import ServicesSettings

log = logging.getLogger(__name__)

DIRECTORY_PATH = "/directory"

# Maps service name -> base URL (no trailing slash)
BUILTIN_SERVICES: Mapping[str, str] = MappingProxyType(
    {
        "LetsEncrypt": "https://acme-v02.api.letsencrypt.org",
        "LetsEncrypt-Staging": "https://acme-staging-v02.api.letsencrypt.org",
    }
)

DEFAULT_SERVICE = "LetsEncrypt-Staging"


class EndpointRegistry:
    """Read-only mapping from service names to ACME base URLs.

    Lookups are exact and case-sensitive.

    Parameters
    ----------
    entries:
        Mapping of service name to base URL.
    default_service:
        Name used when the caller selects no source at all.  Must be
        one of *entries*.

    """

    def __init__(
        self,
        entries: Mapping[str, str],
        *,
        default_service: str = DEFAULT_SERVICE,
    ) -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries))
        if default_service not in self._entries:
            raise UnknownEndpoint(default_service, self._entries)
        self._default = default_service

    @property
    def default_service(self) -> str:
        """Name selected when no source is given."""
        return self._default

    def names(self) -> list[str]:
        """Return every registered service name, sorted."""
        return sorted(self._entries)

    def lookup(self, name: str) -> str:
        """Return the base URL registered for *name*.

        Raises
        ------
        UnknownEndpoint
            If *name* is not registered.  The error lists all names.

        """
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownEndpoint(name, self._entries) from None

    def directory_url(self, name: str) -> str:
        """Return the directory URL for *name* (base URL + ``/directory``)."""
        return self.lookup(name) + DIRECTORY_PATH

    @classmethod
    def from_settings(cls, services: ServicesSettings) -> EndpointRegistry:
        """Build the built-in registry extended with configured services."""
        if not services.extra and services.default_service == DEFAULT_SERVICE:
            return DEFAULT_REGISTRY
        return DEFAULT_REGISTRY.extended(
            services.extra,
            default_service=services.default_service,
        )

    def extended(
        self,
        extra: Mapping[str, str],
        *,
        default_service: str | None = None,
    ) -> EndpointRegistry:
        """Return a new registry with *extra* entries added.

        Existing names cannot be redefined.
        """
        clashes = sorted(set(extra) & set(self._entries))
        if clashes:
            msg = f"Cannot redefine registered ACME services: {', '.join(clashes)}"
            raise ValueError(msg)
        merged = {**self._entries, **extra}
        registry = EndpointRegistry(
            merged,
            default_service=default_service or self._default,
        )
        log.debug("Extended endpoint registry with %d service(s)", len(extra))
        return registry

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<EndpointRegistry services={self.names()} default={self._default!r}>"


DEFAULT_REGISTRY = EndpointRegistry(BUILTIN_SERVICES)
