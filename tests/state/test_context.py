"""Tests for acmedir.state.context -- ambient directory and nonce state."""

from __future__ import annotations

import pytest

from acmedir.errors import DirectoryNotActivated
from acmedir.models.directory import Directory
from acmedir.state.context import (
    AcmeContext,
    NonceState,
    get_context,
    reset_context,
    set_context,
)

DIR_A = Directory(
    new_nonce="https://a.example/new-nonce",
    new_order="https://a.example/new-order",
    resource_url="https://a.example/directory",
)
DIR_B = Directory(
    new_account="https://b.example/new-acct",
    resource_url="https://b.example/directory",
)


class TestDirectoryState:
    def test_absent_by_default(self):
        ctx = AcmeContext()
        assert ctx.directory is None
        assert ctx.nonce is None

    def test_overwrite_without_merge(self):
        ctx = AcmeContext()
        ctx.publish_directory(DIR_A)
        ctx.publish_directory(DIR_B)
        assert ctx.directory == DIR_B
        assert ctx.directory.new_order is None

    def test_publish_same_twice_is_idempotent(self):
        ctx = AcmeContext()
        ctx.publish_directory(DIR_A)
        ctx.publish_directory(DIR_A)
        assert ctx.directory is DIR_A


class TestEndpoint:
    def test_explicit_wins(self):
        ctx = AcmeContext(directory=DIR_A)
        assert ctx.endpoint("new_order", explicit="https://x.example/o") == "https://x.example/o"

    def test_ambient_fallback(self):
        ctx = AcmeContext(directory=DIR_A)
        assert ctx.endpoint("new_order") == "https://a.example/new-order"
        assert ctx.endpoint("newNonce") == "https://a.example/new-nonce"

    def test_no_directory(self):
        with pytest.raises(DirectoryNotActivated, match="pass 'new_order' explicitly"):
            AcmeContext().endpoint("new_order")

    def test_endpoint_missing_from_directory(self):
        ctx = AcmeContext(directory=DIR_B)
        with pytest.raises(DirectoryNotActivated, match="does not provide"):
            ctx.endpoint("new_order")


class TestNonceState:
    def test_publish(self):
        ctx = AcmeContext()
        ctx.publish_nonce("tokenvalue123", "https://a.example/new-nonce")
        assert ctx.nonce == NonceState("tokenvalue123", "https://a.example/new-nonce")

    def test_update_keeps_refresh_url(self):
        ctx = AcmeContext()
        ctx.publish_nonce("first", "https://a.example/new-nonce")
        ctx.update_nonce("second")
        assert ctx.nonce == NonceState("second", "https://a.example/new-nonce")

    def test_update_without_nonce(self):
        with pytest.raises(DirectoryNotActivated):
            AcmeContext().update_nonce("x")

    def test_repr_masks_token(self):
        state = NonceState("abcdefghijklmnop", "https://a.example/new-nonce")
        assert "abcdefghijklmnop" not in repr(state)
        assert "abcdef..." in repr(state)

    def test_clear(self):
        ctx = AcmeContext(directory=DIR_A, nonce=NonceState("t", "u"))
        ctx.clear()
        assert ctx.directory is None
        assert ctx.nonce is None


class TestSharedContext:
    def test_get_returns_same_instance(self):
        assert get_context() is get_context()

    def test_set_returns_previous(self):
        original = get_context()
        mine = AcmeContext()
        assert set_context(mine) is original
        assert get_context() is mine

    def test_reset(self):
        get_context().publish_directory(DIR_A)
        reset_context()
        assert get_context().directory is None
