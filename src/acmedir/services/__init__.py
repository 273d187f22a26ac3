"""Collaborators that act on a resolved directory.

:class:`NonceClient` talks to the ``newNonce`` endpoint and
:func:`activate` publishes results into an ambient context.
"""

from acmedir.services.activation import activate
from acmedir.services.nonce import NonceClient

__all__ = [
    "NonceClient",
    "activate",
]
