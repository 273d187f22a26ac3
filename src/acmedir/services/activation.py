"""Publish a resolved directory, and optionally a nonce, as ambient state.

The two steps are independent and gated by their own flags.  They run
in order -- directory first, nonce second -- and there is no rollback:
a nonce failure leaves an already published directory in place.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from acmedir.errors import MissingNonceEndpoint

if TYPE_CHECKING:
    from acmedir.models.directory import Directory
    from acmedir.services.nonce import NonceClient
    from acmedir.state.context import AcmeContext

log = logging.getLogger(__name__)


def activate(
    directory: Directory,
    context: AcmeContext,
    *,
    activate_directory: bool = False,
    activate_nonce: bool = False,
    nonce_client: NonceClient | None = None,
) -> None:
    """Run the requested activation steps against *context*.

    Parameters
    ----------
    directory:
        The freshly loaded directory.
    context:
        Target ambient state.
    activate_directory:
        Publish *directory* as the ambient directory.
    activate_nonce:
        Bootstrap a nonce from ``directory.new_nonce`` and publish it.
    nonce_client:
        Required when *activate_nonce* is set.

    Raises
    ------
    MissingNonceEndpoint
        If *activate_nonce* is set and the directory has no
        ``newNonce`` URL.  No request is made in that case.
    NonceUnavailable
        If the nonce request fails.

    """
    if activate_directory:
        context.publish_directory(directory)

    if not activate_nonce:
        return

    nonce_url = directory.new_nonce
    if nonce_url is None:
        raise MissingNonceEndpoint(directory.resource_url)
    if nonce_client is None:
        msg = "activate_nonce requires a nonce_client"
        raise ValueError(msg)

    token = nonce_client.bootstrap(nonce_url)
    context.publish_nonce(token, nonce_url)
