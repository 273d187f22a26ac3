"""Nonce client -- obtain an initial anti-replay token.

RFC 8555 §7.2: a client gets a fresh nonce by sending ``HEAD`` to the
directory's ``newNonce`` URL; the token arrives in the
``Replay-Nonce`` response header.  One request, no retry.

Usage::

    client = NonceClient(transport)
    token = client.bootstrap(directory.new_nonce)
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from acmedir.directory.transport import TransportError
from acmedir.errors import NonceUnavailable

if TYPE_CHECKING:
    from acmedir.directory.transport import Transport

log = logging.getLogger(__name__)

REPLAY_NONCE_HEADER = "Replay-Nonce"

# RFC 8555 §6.5.1: base64url without padding
_NONCE_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class NonceClient:
    """Fetches nonces from a ``newNonce`` endpoint over a :class:`Transport`."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def bootstrap(self, nonce_url: str) -> str:
        """Return a fresh nonce token from *nonce_url*.

        Raises
        ------
        NonceUnavailable
            If the request fails, returns a non-2xx status, or carries
            no well-formed ``Replay-Nonce`` header.

        """
        try:
            resp = self._transport.head(nonce_url)
        except TransportError as exc:
            raise NonceUnavailable(nonce_url, exc.reason) from exc

        if not resp.ok:
            raise NonceUnavailable(nonce_url, f"HTTP {resp.status}")

        token = (resp.header(REPLAY_NONCE_HEADER) or "").strip()
        if not token:
            raise NonceUnavailable(nonce_url, f"response has no {REPLAY_NONCE_HEADER} header")
        if not _NONCE_RE.match(token):
            raise NonceUnavailable(
                nonce_url,
                f"{REPLAY_NONCE_HEADER} header is not base64url",
            )

        log.debug(
            "Obtained nonce from %s",
            nonce_url,
            extra={"nonce": token, "directory_url": nonce_url},
        )
        return token
