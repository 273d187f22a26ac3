"""ACMEDIR configuration loader.

Lifecycle::

    # 1. CLI creates the singleton (once, at startup)
    AcmedirConfig(config_file="/etc/acmedir/config.yaml")

    # 2. Any module retrieves it afterwards
    from acmedir.config import get_config
    cfg = get_config()
    cfg.settings.transport.timeout_seconds  # typed access

    # 3. Library use without a config file
    from acmedir.config import current_settings
    current_settings()  # built-in defaults until a config is loaded

Loading order: read YAML/JSON -> resolve ``${VAR}`` references ->
JSON Schema validation -> cross-field checks -> typed settings.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import jsonschema
import yaml

from acmedir.config.settings import AcmedirSettings, build_settings

_SCHEMA_PATH = Path(__file__).parent / "schema.json"

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level singleton reference
# ---------------------------------------------------------------------------
_instance: AcmedirConfig | None = None


def get_config() -> AcmedirConfig:
    """Return the initialised configuration singleton.

    Raises :class:`RuntimeError` if :class:`AcmedirConfig` has not been
    created yet (i.e. the CLI entry point has not run).
    """
    if _instance is None:
        msg = (
            "Configuration not initialised. "
            "AcmedirConfig must be created with config_file= before calling get_config()."
        )
        raise RuntimeError(
            msg,
        )
    return _instance


def current_settings() -> AcmedirSettings:
    """Return the loaded settings, or built-in defaults when none are loaded."""
    if _instance is None:
        return build_settings(None)
    return _instance.settings


# ---------------------------------------------------------------------------
# Validation error collector
# ---------------------------------------------------------------------------


class ConfigValidationError(Exception):
    """Raised when schema or cross-field validation finds problems."""

    def __init__(self, errors: list[str]) -> None:
        """Store *errors* and build a human-readable message."""
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _substitute(value: str, where: str, unset: list[str]) -> str:
    """Expand a whole-string ``${VAR}`` / ``${VAR:-default}`` reference."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    name, fallback = match.group(1), match.group(2)
    resolved = os.environ.get(name, fallback)
    if resolved is None:
        unset.append(f"{where}: environment variable '{name}' is not set and has no default")
        return value
    return resolved


def _expand_env(node: Any, where: str, unset: list[str]) -> Any:  # noqa: ANN401
    """Return a copy of *node* with every env-var reference expanded."""
    if isinstance(node, str):
        return _substitute(node, where, unset)
    if isinstance(node, dict):
        return {
            key: _expand_env(value, f"{where}.{key}" if where else str(key), unset)
            for key, value in node.items()
        }
    if isinstance(node, list):
        return [_expand_env(item, f"{where}[{idx}]", unset) for idx, item in enumerate(node)]
    return node


def expand_env_vars(data: dict[str, Any]) -> dict[str, Any]:
    """Expand env-var references throughout a raw config dict.

    Typical uses are a per-host CA bundle
    (``ca_cert_path: ${ACME_CA_BUNDLE}``) or a private service URL
    (``extra: {Corp: ${CORP_ACME_URL}}``).

    Raises
    ------
    ConfigValidationError
        Listing every reference whose variable is unset and has no
        default.

    """
    unset: list[str] = []
    expanded = _expand_env(data, "", unset)
    if unset:
        raise ConfigValidationError(unset)
    return expanded


def _read_config_file(config_file: Path) -> dict[str, Any]:
    """Parse a YAML or JSON config file into a dict."""
    try:
        with config_file.open(encoding="utf-8") as f:
            if config_file.suffix.lower() in {".yaml", ".yml"}:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as exc:
        msg = f"Cannot read configuration file '{config_file}': {exc}"
        raise ConfigValidationError([msg]) from exc
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        msg = f"Cannot parse configuration file '{config_file}': {exc}"
        raise ConfigValidationError([msg]) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Configuration root must be a mapping, got {type(data).__name__}"
        raise ConfigValidationError([msg])
    return data


def _is_base_url(url: str) -> bool:
    parts = urlsplit(url)
    return parts.scheme in {"http", "https"} and bool(parts.netloc)


# ---------------------------------------------------------------------------
# Config class
# ---------------------------------------------------------------------------


class AcmedirConfig:
    """Central configuration for ACMEDIR.

    The JSON schema is bundled at ``config/schema.json``; users supply
    only ``config_file``.  After construction the typed settings tree
    is available at :pyattr:`settings` and the raw dict via
    :pyattr:`data` / :pymeth:`get`.
    """

    def __init__(self, *, config_file: str | Path) -> None:
        """Load, validate and register the configuration singleton.

        Parameters
        ----------
        config_file:
            Path to the YAML/JSON configuration file.

        Raises
        ------
        ConfigValidationError
            If the file cannot be read or fails validation.

        """
        global _instance  # noqa: PLW0603

        self._source = Path(config_file)
        self._data: dict[str, Any] = {}
        self._load()
        self._validate_schema()
        self.additional_checks()

        self._settings: AcmedirSettings = build_settings(self._data)
        _instance = self

    # -- lifecycle ----------------------------------------------------------

    def _load(self) -> None:
        """Read the file and expand env-var references.

        Expansion happens before schema validation, so a substituted
        ``${ACMEDIR_LOG_LEVEL:-INFO}`` is still checked against the enum.
        """
        self._data = expand_env_vars(_read_config_file(self._source))

    def _validate_schema(self) -> None:
        schema = json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))
        validator = jsonschema.Draft202012Validator(schema)
        errors = [
            f"{'.'.join(str(p) for p in err.absolute_path) or '(root)'}: {err.message}"
            for err in sorted(validator.iter_errors(self._data), key=lambda e: list(e.path))
        ]
        if errors:
            raise ConfigValidationError(errors)

    # -- typed access -------------------------------------------------------

    @property
    def settings(self) -> AcmedirSettings:
        """Fully-typed, frozen settings tree."""
        return self._settings

    @property
    def data(self) -> dict[str, Any]:
        """The raw, env-resolved configuration dict."""
        return self._data

    def get(self, dotted_path: str, default: Any = None) -> Any:  # noqa: ANN401
        """Return a value by dot-path (``"transport.verify_ssl"``)."""
        node: Any = self._data
        for part in dotted_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    # -- cross-field validation ---------------------------------------------

    def additional_checks(self) -> None:
        """Semantic & cross-field validation run after the schema check."""
        from acmedir.core.registry import BUILTIN_SERVICES  # noqa: PLC0415

        errors: list[str] = []
        warnings: list[str] = []

        transport = self._data.get("transport") or {}
        services = self._data.get("services") or {}

        # -- services --
        extra = services.get("extra") or {}
        for name, url in extra.items():
            if name in BUILTIN_SERVICES:
                errors.append(
                    f"services.extra.{name} redefines a built-in service; "
                    f"built-in names: {sorted(BUILTIN_SERVICES)}",
                )
            if not _is_base_url(url):
                errors.append(
                    f"services.extra.{name} must be an absolute http(s) URL (got '{url}')",
                )
            elif url.endswith("/"):
                errors.append(
                    f"services.extra.{name} must not end with '/' (got '{url}')",
                )
            elif url.endswith("/directory"):
                warnings.append(
                    f"services.extra.{name} ends with '/directory' -- "
                    "base URLs get '/directory' appended on lookup",
                )

        default_service = services.get("default_service")
        known = set(BUILTIN_SERVICES) | set(extra)
        if default_service is not None and default_service not in known:
            errors.append(
                f"services.default_service '{default_service}' is not a known "
                f"service. Known services: {sorted(known)}",
            )

        # -- transport --
        if transport.get("ca_cert_path"):
            if not transport.get("verify_ssl", True):
                warnings.append(
                    "transport.ca_cert_path is set but transport.verify_ssl is "
                    "false -- the CA bundle will not be used for verification",
                )
            if not Path(transport["ca_cert_path"]).is_file():
                errors.append(
                    f"transport.ca_cert_path '{transport['ca_cert_path']}' does not exist",
                )
        if transport.get("verify_ssl") is False:
            warnings.append(
                "transport.verify_ssl is false -- ACME server certificates "
                "will not be verified",
            )

        for w in warnings:
            log.warning("Config warning: %s", w)

        if errors:
            raise ConfigValidationError(errors)

    # -- helpers ------------------------------------------------------------

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton -- testing only."""
        global _instance  # noqa: PLW0603
        _instance = None

    def __repr__(self) -> str:
        """Return a developer-friendly representation."""
        return f"<AcmedirConfig config_file={self._source}>"
