"""Tests for acmedir.cli.main -- argument parsing and command dispatch.

Network access is replaced by patching the transport class that
``acmedir.service_directory`` instantiates.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from acmedir.cli.main import _build_parser, main
from acmedir.directory.loader import load_local
from acmedir.directory.transport import Transport, TransportError
from acmedir.errors import UnknownEndpoint

NONCE = "oFvnlFP1wIhRlYS2jTaXbA"


@pytest.fixture()
def patched_transport(transport):
    """Route every CLI request through the mock *transport* fixture."""
    with patch("acmedir.service_directory.UrllibTransport", return_value=transport) as mk:
        yield mk


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args([])
        assert exc_info.value.code == 2

    def test_sources_are_mutually_exclusive(self):
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["resolve", "--service", "LetsEncrypt", "--url", "https://x"])
        assert exc_info.value.code == 2

    def test_resolve_defaults(self):
        args = _build_parser().parse_args(["resolve"])
        assert args.service is None
        assert args.url is None
        assert args.path is None
        assert args.export is None
        assert args.nonce is False

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "acmedir" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestConfigOption:
    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(tmp_path / "absent.yaml"), "services"])
        assert exc_info.value.code == 1
        assert "configuration file not found" in capsys.readouterr().err

    def test_invalid_file(self, write_config, capsys):
        cfg = write_config({"logging": {"level": "LOUD"}})
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(cfg), "services"])
        assert exc_info.value.code == 1
        assert "Configuration validation failed" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# services
# ---------------------------------------------------------------------------


class TestServices:
    def test_builtin(self, capsys):
        main(["services"])
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "LetsEncrypt\thttps://acme-v02.api.letsencrypt.org/directory",
            "LetsEncrypt-Staging (default)\thttps://acme-staging-v02.api.letsencrypt.org/directory",
        ]

    def test_with_configured_extra(self, write_config, capsys):
        cfg = write_config(
            {
                "services": {
                    "default_service": "Corp",
                    "extra": {"Corp": "https://acme.corp.example"},
                },
            },
        )
        main(["-c", str(cfg), "services"])
        out = capsys.readouterr().out
        assert "Corp (default)\thttps://acme.corp.example/directory" in out
        assert "LetsEncrypt-Staging\t" in out


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


class TestResolve:
    def test_default_service(self, patched_transport, transport, capsys, directory_payload):
        main(["resolve"])
        transport.get.assert_called_once_with(
            "https://acme-staging-v02.api.letsencrypt.org/directory",
        )
        out = json.loads(capsys.readouterr().out)
        assert out["newOrder"] == directory_payload["newOrder"]
        assert out["resourceUrl"] == "https://acme-staging-v02.api.letsencrypt.org/directory"

    def test_by_url(self, patched_transport, transport):
        main(["resolve", "--url", "https://ca.example.com/dir"])
        transport.get.assert_called_once_with("https://ca.example.com/dir")

    def test_with_nonce(self, patched_transport, capsys, directory_payload):
        main(["resolve", "--service", "LetsEncrypt", "--nonce"])
        out = json.loads(capsys.readouterr().out)
        assert out["nonce"] == NONCE
        assert out["directory"]["newNonce"] == directory_payload["newNonce"]

    def test_export_then_path(self, patched_transport, transport, tmp_path, capsys):
        target = tmp_path / "le.acmedir"
        main(["resolve", "--export", str(target)])
        first = json.loads(capsys.readouterr().out)
        assert load_local(target).to_dict() == first

        transport.reset_mock()
        main(["resolve", "--path", str(target)])
        transport.get.assert_not_called()
        assert json.loads(capsys.readouterr().out) == first

    def test_export_failure(self, patched_transport, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["resolve", "--export", str(tmp_path / "missing-dir" / "d.json")])
        assert exc_info.value.code == 1
        assert "cannot write" in capsys.readouterr().err

    def test_unknown_service(self, patched_transport, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["resolve", "--service", "Nope"])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "error: Unknown ACME service 'Nope'" in err
        assert "LetsEncrypt-Staging" in err

    def test_debug_reraises(self, patched_transport):
        with pytest.raises(UnknownEndpoint):
            main(["--debug", "resolve", "--service", "Nope"])

    def test_unreachable(self, capsys):
        t = MagicMock(spec=Transport)
        t.get.side_effect = TransportError("https://x.example/dir", "connection refused")
        with (
            patch("acmedir.service_directory.UrllibTransport", return_value=t),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["resolve", "--url", "https://x.example/dir"])
        assert exc_info.value.code == 1
        assert "connection refused" in capsys.readouterr().err

    def test_does_not_touch_shared_context(self, patched_transport):
        from acmedir.state.context import get_context

        main(["resolve"])
        assert get_context().directory is None
