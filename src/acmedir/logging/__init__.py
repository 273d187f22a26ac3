"""Logging subsystem for ACMEDIR.

Public API::

    from acmedir.logging import configure_logging

    configure_logging(settings.logging)
"""

from acmedir.logging.setup import configure_logging

__all__ = ["configure_logging"]
