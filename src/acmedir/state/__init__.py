"""Ambient state shared with later protocol operations."""

from acmedir.state.context import (
    AcmeContext,
    NonceState,
    get_context,
    reset_context,
    set_context,
)

__all__ = [
    "AcmeContext",
    "NonceState",
    "get_context",
    "reset_context",
    "set_context",
]
