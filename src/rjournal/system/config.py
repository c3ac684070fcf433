"""System configuration for rjournal.

One YAML file configures the whole library: journal status vocabulary and
thresholds used by report aggregates, plus logging.

Search Order:
1. Explicit path passed to ``SystemConfig.load()``
2. ``$RJOURNAL_CONFIG``
3. ``config/rjournal.yaml`` relative to the working directory

A missing or empty file means built-in defaults. Partial files are merged
over the defaults, and ``${VAR}`` placeholders are substituted from the
environment before parsing into dataclasses. Call ``setup_logging()`` at
application startup to apply the ``logging`` section.

Example YAML:
    metrics:
      winner_status: Winner
      expense_status: Expense
      break_even_threshold: 0.1
    logging:
      level: DEBUG
      enable_file: true
      file_path: ${JOURNAL_HOME}/logs/rjournal.log
"""

import os
import re
from dataclasses import asdict, dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from rjournal.system.log_system import LoggingConfig as LoggerConfig, configure_logging

CONFIG_ENV_VAR = "RJOURNAL_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/rjournal.yaml")

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


@dataclass(frozen=True)
class MetricsConfig:
    """Journal vocabulary and thresholds for report aggregates.

    Attributes:
        winner_status: Status value marking a winning trade
        expense_status: Status value marking a losing trade
        break_even_threshold: A result with ``abs(result) < threshold`` is break-even
    """

    winner_status: str = "Winner"
    expense_status: str = "Expense"
    break_even_threshold: Decimal = Decimal("0.1")

    def __post_init__(self) -> None:
        """Validate metrics config."""
        if not self.winner_status:
            raise ValueError("winner_status cannot be empty")

        if not self.expense_status:
            raise ValueError("expense_status cannot be empty")

        if self.winner_status == self.expense_status:
            raise ValueError(f"winner_status and expense_status must differ, got {self.winner_status!r}")

        if not isinstance(self.break_even_threshold, Decimal):
            object.__setattr__(self, "break_even_threshold", Decimal(str(self.break_even_threshold)))

        if self.break_even_threshold < 0:
            raise ValueError(f"break_even_threshold must be non-negative, got {self.break_even_threshold}")


@dataclass
class LoggingConfig:
    """Logging section of the system config."""

    level: str = "INFO"
    format: str = "console"
    enable_file: bool = False
    file_path: str = "logs/rjournal.log"
    file_level: str = "WARNING"
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the validated model consumed by configure_logging."""
        return LoggerConfig(
            level=self.level,  # type: ignore[arg-type]
            format=self.format,  # type: ignore[arg-type]
            enable_file=self.enable_file,
            file_path=Path(self.file_path),
            file_level=self.file_level,  # type: ignore[arg-type]
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
        )


@dataclass
class SystemConfig:
    """Complete rjournal configuration."""

    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "SystemConfig":
        """Load configuration from YAML, falling back to defaults.

        Args:
            path: Config file path. If None, uses $RJOURNAL_CONFIG or
                config/rjournal.yaml.

        Returns:
            SystemConfig with file values merged over defaults

        Raises:
            yaml.YAMLError: If the file is not valid YAML
            ValueError: If the file holds invalid values
        """
        if path is None:
            path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
        path = Path(path)

        data: dict[str, Any] = {}
        if path.exists():
            with path.open(encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
            if loaded is not None:
                if not isinstance(loaded, dict):
                    raise ValueError(f"Config file {path} must contain a mapping, got {type(loaded).__name__}")
                data = loaded

        defaults = {
            "metrics": _metrics_to_dict(MetricsConfig()),
            "logging": asdict(LoggingConfig()),
        }
        merged = _deep_merge(defaults, _substitute_env_vars(data))
        return cls._from_dict(merged)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build from a (possibly partial) dict; missing sections use defaults."""
        metrics_data = dict(data.get("metrics") or {})
        if "break_even_threshold" in metrics_data:
            raw = metrics_data["break_even_threshold"]
            try:
                metrics_data["break_even_threshold"] = Decimal(str(raw))
            except InvalidOperation as e:
                raise ValueError(f"break_even_threshold must be a number, got {raw!r}") from e

        try:
            return cls(
                metrics=MetricsConfig(**metrics_data),
                logging=LoggingConfig(**(data.get("logging") or {})),
            )
        except TypeError as e:
            raise ValueError(f"Invalid config section: {e}") from e


def _metrics_to_dict(config: MetricsConfig) -> dict[str, Any]:
    return {
        "winner_status": config.winner_status,
        "expense_status": config.expense_status,
        "break_even_threshold": str(config.break_even_threshold),
    }


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base (override wins)."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Replace ``${VAR}`` in strings (recursively); undefined vars keep the placeholder."""
    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    return value


_system_config: SystemConfig | None = None


def get_system_config(path: str | Path | None = None) -> SystemConfig:
    """Get the cached system config, loading it on first use.

    Passing an explicit path always reloads from that path.
    """
    global _system_config
    if _system_config is None or path is not None:
        _system_config = SystemConfig.load(path)
    return _system_config


def reload_system_config(path: str | Path | None = None) -> SystemConfig:
    """Force a reload of the system config."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config


def setup_logging(path: str | Path | None = None) -> SystemConfig:
    """Load the system config and apply its ``logging`` section.

    Args:
        path: Config file path, as for ``get_system_config``

    Returns:
        The SystemConfig that was applied
    """
    config = get_system_config(path)
    configure_logging(config.logging.to_logger_config())
    return config
