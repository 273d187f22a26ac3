"""Directory entity and its ``meta`` value object (RFC 8555 §7.1.1).

Both are frozen dataclasses.  Collections are stored as tuples so a
loaded directory cannot be mutated in place; use
:func:`dataclasses.replace` to derive a modified copy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

log = logging.getLogger(__name__)

# Wire name -> attribute name for every endpoint field
ENDPOINT_FIELDS: dict[str, str] = {
    "newNonce": "new_nonce",
    "newAccount": "new_account",
    "newOrder": "new_order",
    "newAuthz": "new_authz",
    "revokeCert": "revoke_cert",
    "keyChange": "key_change",
    "renewalInfo": "renewal_info",
}


def _str_or_none(value: Any) -> str | None:  # noqa: ANN401
    return value if isinstance(value, str) and value else None


def _str_tuple(value: Any) -> tuple[str, ...]:  # noqa: ANN401
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(v for v in value if isinstance(v, str))


@dataclass(frozen=True)
class DirectoryMeta:
    """Server metadata advertised in the directory ``meta`` object."""

    terms_of_service: str | None = None
    website: str | None = None
    caa_identities: tuple[str, ...] = ()
    external_account_required: bool = False
    profiles: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DirectoryMeta:
        """Build from the wire ``meta`` object, ignoring unknown keys."""
        profiles = data.get("profiles")
        # Profile descriptions are not kept, only the names
        if isinstance(profiles, dict):
            profile_names = tuple(sorted(profiles))
        else:
            profile_names = tuple(sorted(_str_tuple(profiles)))
        return cls(
            terms_of_service=_str_or_none(data.get("termsOfService")),
            website=_str_or_none(data.get("website")),
            caa_identities=_str_tuple(data.get("caaIdentities")),
            external_account_required=data.get("externalAccountRequired") is True,
            profiles=profile_names,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire ``meta`` shape, omitting empty values."""
        result: dict[str, Any] = {}
        if self.terms_of_service:
            result["termsOfService"] = self.terms_of_service
        if self.website:
            result["website"] = self.website
        if self.caa_identities:
            result["caaIdentities"] = list(self.caa_identities)
        if self.external_account_required:
            result["externalAccountRequired"] = True
        if self.profiles:
            result["profiles"] = {name: "" for name in self.profiles}
        return result


@dataclass(frozen=True)
class Directory:
    """Canonical ACME service directory.

    Every endpoint is an absolute URL or ``None`` when the source
    document did not advertise it.  Completeness is not checked here;
    the operation that needs a missing endpoint reports the error.

    Attributes
    ----------
    resource_url:
        URL the directory was fetched from, when known.

    """

    new_nonce: str | None = None
    new_account: str | None = None
    new_order: str | None = None
    new_authz: str | None = None
    revoke_cert: str | None = None
    key_change: str | None = None
    renewal_info: str | None = None
    meta: DirectoryMeta | None = None
    resource_url: str | None = None

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        resource_url: str | None = None,
    ) -> Directory:
        """Build a directory from its JSON wire shape.

        Unknown keys are ignored, missing or non-string endpoint values
        become ``None``.  An explicit *resource_url* wins over a
        ``resourceUrl`` key stored by a previous export.
        """
        endpoints = {attr: _str_or_none(data.get(key)) for key, attr in ENDPOINT_FIELDS.items()}
        meta_data = data.get("meta")
        meta = DirectoryMeta.from_dict(meta_data) if isinstance(meta_data, dict) else None
        ignored = sorted(
            k for k in data if k not in ENDPOINT_FIELDS and k not in {"meta", "resourceUrl"}
        )
        if ignored:
            log.debug("Ignoring unrecognised directory fields: %s", ", ".join(ignored))
        return cls(
            **endpoints,
            meta=meta,
            resource_url=resource_url or _str_or_none(data.get("resourceUrl")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON wire shape, omitting absent endpoints."""
        result: dict[str, Any] = {}
        for key, attr in ENDPOINT_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                result[key] = value
        if self.meta is not None:
            result["meta"] = self.meta.to_dict()
        if self.resource_url:
            result["resourceUrl"] = self.resource_url
        return result

    def endpoint(self, name: str) -> str | None:
        """Return an endpoint by attribute (``new_order``) or wire (``newOrder``) name."""
        attr = ENDPOINT_FIELDS.get(name, name)
        if attr not in ENDPOINT_FIELDS.values():
            msg = f"Unknown directory endpoint '{name}'"
            raise KeyError(msg)
        return getattr(self, attr)
