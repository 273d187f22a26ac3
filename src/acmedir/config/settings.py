"""Typed, frozen dataclasses for every configuration section.

This module is the **single source of truth** for default values.
JSON Schema defaults exist only for documentation -- these builders
are what the application actually reads.

Access pattern::

    from acmedir.config import current_settings

    transport = current_settings().transport
    print(transport.timeout_seconds, transport.verify_ssl)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


def _default_user_agent() -> str:
    from acmedir import __version__  # noqa: PLC0415

    return f"acmedir/{__version__}"


@dataclass(frozen=True)
class TransportSettings:
    """HTTP client settings for directory and nonce requests."""

    timeout_seconds: float | None
    verify_ssl: bool
    ca_cert_path: str | None
    user_agent: str


def build_transport(data: dict | None) -> TransportSettings:
    d = data or {}
    return TransportSettings(
        timeout_seconds=d.get("timeout_seconds"),
        verify_ssl=d.get("verify_ssl", True),
        ca_cert_path=d.get("ca_cert_path"),
        user_agent=d.get("user_agent") or _default_user_agent(),
    )


# ---------------------------------------------------------------------------
# Services (endpoint registry)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ServicesSettings:
    """Extra named ACME services and the default selection."""

    default_service: str
    extra: dict[str, str] = field(default_factory=dict)


def _build_services(data: dict | None) -> ServicesSettings:
    from acmedir.core.registry import DEFAULT_SERVICE  # noqa: PLC0415

    d = data or {}
    return ServicesSettings(
        default_service=d.get("default_service", DEFAULT_SERVICE),
        extra=dict(d.get("extra") or {}),
    )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingSettings:
    """Application logging configuration (level, format)."""

    level: str
    format: str


def _build_logging(data: dict | None) -> LoggingSettings:
    d = data or {}
    return LoggingSettings(
        level=d.get("level", "INFO"),
        format=d.get("format", "text"),
    )


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AcmedirSettings:
    """Complete settings tree."""

    transport: TransportSettings
    services: ServicesSettings
    logging: LoggingSettings


def build_settings(data: dict[str, Any] | None) -> AcmedirSettings:
    """Build the typed settings tree from a validated config dict."""
    d = data or {}
    return AcmedirSettings(
        transport=build_transport(d.get("transport")),
        services=_build_services(d.get("services")),
        logging=_build_logging(d.get("logging")),
    )
