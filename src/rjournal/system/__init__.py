"""
System configuration package.

Exports:
    - SystemConfig: Complete system configuration dataclass
    - MetricsConfig: Journal status vocabulary and thresholds
    - get_system_config: Get system config singleton
    - reload_system_config: Force reload system config
    - setup_logging: Apply the config file's logging section
    - LoggingConfig: Logging settings model
    - configure_logging: Install console/file logging from a LoggingConfig
    - reset_logging: Remove installed logging (tests)
"""

from rjournal.system.config import (
    MetricsConfig,
    SystemConfig,
    get_system_config,
    reload_system_config,
    setup_logging,
)
from rjournal.system.log_system import LoggingConfig, configure_logging, is_configured, reset_logging

__all__ = [
    "SystemConfig",
    "MetricsConfig",
    "get_system_config",
    "reload_system_config",
    "setup_logging",
    "LoggingConfig",
    "configure_logging",
    "is_configured",
    "reset_logging",
]
