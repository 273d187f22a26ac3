"""Tests for acmedir.services.nonce -- the newNonce client."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from acmedir.directory.transport import HttpResponse, Transport, TransportError
from acmedir.errors import NonceUnavailable
from acmedir.services.nonce import NonceClient

NONCE_URL = "https://acme.example.com/acme/new-nonce"


def _transport(resp=None, side_effect=None) -> MagicMock:
    t = MagicMock(spec=Transport)
    if side_effect is not None:
        t.head.side_effect = side_effect
    else:
        t.head.return_value = resp
    return t


class TestBootstrap:
    def test_returns_replay_nonce(self):
        t = _transport(HttpResponse(status=200, headers={"replay-nonce": "oFvnlFP1wIhRlYS2jTaXbA"}))
        assert NonceClient(t).bootstrap(NONCE_URL) == "oFvnlFP1wIhRlYS2jTaXbA"
        t.head.assert_called_once_with(NONCE_URL)
        t.get.assert_not_called()

    def test_accepts_204(self):
        t = _transport(HttpResponse(status=204, headers={"replay-nonce": "abc_DEF-123"}))
        assert NonceClient(t).bootstrap(NONCE_URL) == "abc_DEF-123"

    def test_missing_header(self):
        t = _transport(HttpResponse(status=200))
        with pytest.raises(NonceUnavailable, match="Replay-Nonce"):
            NonceClient(t).bootstrap(NONCE_URL)

    def test_malformed_header(self):
        t = _transport(HttpResponse(status=200, headers={"replay-nonce": "not base64!"}))
        with pytest.raises(NonceUnavailable, match="base64url"):
            NonceClient(t).bootstrap(NONCE_URL)

    def test_error_status(self):
        t = _transport(HttpResponse(status=405))
        with pytest.raises(NonceUnavailable, match="HTTP 405"):
            NonceClient(t).bootstrap(NONCE_URL)

    def test_transport_error_not_retried(self):
        t = _transport(side_effect=TransportError(NONCE_URL, "connection refused"))
        with pytest.raises(NonceUnavailable) as exc_info:
            NonceClient(t).bootstrap(NONCE_URL)
        assert exc_info.value.url == NONCE_URL
        assert t.head.call_count == 1
