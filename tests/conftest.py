"""Root conftest for the ACMEDIR test suite."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)

from acmedir.directory.transport import HttpResponse, Transport  # noqa: E402

STAGING_DIRECTORY_URL = "https://acme-staging-v02.api.letsencrypt.org/directory"


# ---------------------------------------------------------------------------
# Directory documents
# ---------------------------------------------------------------------------


@pytest.fixture()
def directory_payload() -> dict:
    """Return a directory document shaped like Let's Encrypt staging."""
    base = "https://acme-staging-v02.api.letsencrypt.org/acme"
    return {
        "keyChange": f"{base}/key-change",
        "meta": {
            "caaIdentities": ["letsencrypt.org"],
            "profiles": {
                "classic": "https://letsencrypt.org/docs/profiles#classic",
                "tlsserver": "https://letsencrypt.org/docs/profiles#tlsserver",
            },
            "termsOfService": "https://letsencrypt.org/documents/LE-SA-v1.5.pdf",
            "website": "https://letsencrypt.org/docs/staging-environment/",
        },
        "newAccount": f"{base}/new-acct",
        "newNonce": f"{base}/new-nonce",
        "newOrder": f"{base}/new-order",
        "renewalInfo": "https://acme-staging-v02.api.letsencrypt.org/draft-ietf-acme-ari-03/renewalInfo",
        "revokeCert": f"{base}/revoke-cert",
        "zV1x2y3": "https://community.letsencrypt.org/t/adding-random-entries-to-the-directory/33417",
    }


@pytest.fixture()
def json_response():
    """Return a factory building a 200 JSON :class:`HttpResponse`."""

    def _make(payload, status: int = 200, headers: dict | None = None) -> HttpResponse:
        return HttpResponse(
            status=status,
            headers=headers or {"content-type": "application/json"},
            body=json.dumps(payload).encode("utf-8"),
        )

    return _make


@pytest.fixture()
def transport(directory_payload, json_response) -> MagicMock:
    """A mock transport serving *directory_payload* and a nonce."""
    t = MagicMock(spec=Transport)
    t.get.return_value = json_response(directory_payload)
    t.head.return_value = HttpResponse(
        status=200,
        headers={"replay-nonce": "oFvnlFP1wIhRlYS2jTaXbA"},
    )
    return t


# ---------------------------------------------------------------------------
# Config files
# ---------------------------------------------------------------------------


@pytest.fixture()
def write_config(tmp_path: Path):
    """Return a factory writing a dict to a temp YAML file."""

    def _write(data: dict, name: str = "config.yaml") -> Path:
        cfg = tmp_path / name
        cfg.write_text(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
        return cfg

    return _write


# ---------------------------------------------------------------------------
# Singleton cleanup -- autouse so every test gets a fresh slate
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fresh_state():
    """Reset the config singleton and the shared context around every test."""
    from acmedir.config.acmedir_config import AcmedirConfig
    from acmedir.state.context import reset_context

    AcmedirConfig.reset()
    reset_context()
    yield
    AcmedirConfig.reset()
    reset_context()


@pytest.fixture(autouse=True)
def restore_acmedir_logger():
    """Undo ``configure_logging`` side effects on the ``acmedir`` logger."""
    logger = logging.getLogger("acmedir")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]
