"""Configuration subsystem for ACMEDIR.

Public API::

    from acmedir.config import get_config, AcmedirConfig

    # At startup (CLI only):
    AcmedirConfig(config_file="config.yaml")

    # Everywhere else:
    cfg   = get_config()
    tout  = cfg.settings.transport.timeout_seconds   # typed access
    extra = cfg.get("services.extra")                # dynamic dot-path
"""

from acmedir.config.acmedir_config import (
    AcmedirConfig,
    ConfigValidationError,
    current_settings,
    get_config,
)
from acmedir.config.settings import (
    AcmedirSettings,
    LoggingSettings,
    ServicesSettings,
    TransportSettings,
    build_settings,
)

__all__ = [
    # Core
    "AcmedirConfig",
    # Root
    "AcmedirSettings",
    "ConfigValidationError",
    # Sections
    "LoggingSettings",
    "ServicesSettings",
    "TransportSettings",
    "build_settings",
    "current_settings",
    "get_config",
]
