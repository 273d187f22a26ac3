"""Unit tests for acmedir.core.registry -- the endpoint registry."""

from __future__ import annotations

import pytest

from acmedir.config.settings import ServicesSettings
from acmedir.core.registry import (
    BUILTIN_SERVICES,
    DEFAULT_REGISTRY,
    DEFAULT_SERVICE,
    EndpointRegistry,
)
from acmedir.errors import UnknownEndpoint


class TestLookup:
    @pytest.mark.parametrize(("name", "url"), sorted(BUILTIN_SERVICES.items()))
    def test_lookup_matches_static_table(self, name, url):
        assert DEFAULT_REGISTRY.lookup(name) == url
        assert DEFAULT_REGISTRY.lookup(name) == DEFAULT_REGISTRY.lookup(name)

    def test_production_directory_url(self):
        assert (
            DEFAULT_REGISTRY.directory_url("LetsEncrypt")
            == "https://acme-v02.api.letsencrypt.org/directory"
        )

    def test_default_is_staging(self):
        assert DEFAULT_REGISTRY.default_service == DEFAULT_SERVICE == "LetsEncrypt-Staging"
        assert (
            DEFAULT_REGISTRY.directory_url(DEFAULT_SERVICE)
            == "https://acme-staging-v02.api.letsencrypt.org/directory"
        )

    def test_lookup_is_case_sensitive(self):
        with pytest.raises(UnknownEndpoint):
            DEFAULT_REGISTRY.lookup("letsencrypt")

    def test_unknown_lists_every_name(self):
        with pytest.raises(UnknownEndpoint) as exc_info:
            DEFAULT_REGISTRY.lookup("ZeroSSL")
        err = exc_info.value
        assert err.name == "ZeroSSL"
        assert err.known_names == ("LetsEncrypt", "LetsEncrypt-Staging")
        for name in BUILTIN_SERVICES:
            assert name in str(err)

    def test_names_sorted(self):
        assert DEFAULT_REGISTRY.names() == sorted(BUILTIN_SERVICES)
        assert list(DEFAULT_REGISTRY) == DEFAULT_REGISTRY.names()
        assert len(DEFAULT_REGISTRY) == len(BUILTIN_SERVICES)
        assert "LetsEncrypt" in DEFAULT_REGISTRY

    def test_builtin_table_is_read_only(self):
        with pytest.raises(TypeError):
            BUILTIN_SERVICES["Evil"] = "https://evil.example"  # type: ignore[index]


class TestExtended:
    def test_extended_returns_new_registry(self):
        reg = DEFAULT_REGISTRY.extended({"Internal": "https://acme.internal.example"})
        assert reg.lookup("Internal") == "https://acme.internal.example"
        assert "Internal" not in DEFAULT_REGISTRY

    def test_extended_rejects_redefinition(self):
        with pytest.raises(ValueError, match="LetsEncrypt"):
            DEFAULT_REGISTRY.extended({"LetsEncrypt": "https://elsewhere.example"})

    def test_unknown_default_rejected(self):
        with pytest.raises(UnknownEndpoint):
            EndpointRegistry({"A": "https://a.example"}, default_service="B")

    def test_from_settings_default_returns_builtin(self):
        settings = ServicesSettings(default_service=DEFAULT_SERVICE)
        assert EndpointRegistry.from_settings(settings) is DEFAULT_REGISTRY

    def test_from_settings_with_extra(self):
        settings = ServicesSettings(
            default_service="Internal",
            extra={"Internal": "https://acme.internal.example"},
        )
        reg = EndpointRegistry.from_settings(settings)
        assert reg.default_service == "Internal"
        assert reg.directory_url("Internal") == "https://acme.internal.example/directory"
        assert reg.lookup("LetsEncrypt") == BUILTIN_SERVICES["LetsEncrypt"]
