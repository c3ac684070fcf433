"""Logging setup for rjournal.

Library modules log through ``structlog.get_logger(__name__)`` and never
touch handlers themselves. The calling application routes those events by
calling ``configure_logging`` once, usually via ``setup_logging`` in
``rjournal.system.config`` so the YAML ``logging`` section applies.

Events:
- ``metrics.missed_r.skipped`` (DEBUG): chicken-out without a risk distance
- ``stats.summary.built`` (DEBUG): KPI block computed

Output:
- Console: structlog's dev renderer (``console``) or JSON lines (``json``)
- File (optional): JSON lines in a size-rotated file

Example:
    >>> from rjournal.system import LoggingConfig, configure_logging
    >>> configure_logging(LoggingConfig(level="DEBUG"))
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_LOG_FILE = Path("logs/rjournal.log")

# Applied to structlog events and to records from plain stdlib loggers alike
_PRE_CHAIN: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
]

_configured = False


class LoggingConfig(BaseModel):
    """Where rjournal log events go and from which level."""

    level: LogLevel = "INFO"
    format: Literal["console", "json"] = "console"
    enable_file: bool = False
    file_path: Path = DEFAULT_LOG_FILE
    file_level: LogLevel = "WARNING"
    max_file_size_mb: int = Field(default=10, gt=0)
    backup_count: int = Field(default=3, ge=0)


def _formatter(fmt: str) -> structlog.stdlib.ProcessorFormatter:
    renderer: Any
    if fmt == "json":
        renderer = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=False)]

    return structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderer],
        foreign_pre_chain=_PRE_CHAIN,
    )


def _file_handler(config: LoggingConfig) -> logging.Handler:
    config.file_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        config.file_path,
        maxBytes=config.max_file_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setLevel(config.file_level)
    handler.setFormatter(_formatter("json"))
    return handler


def configure_logging(config: LoggingConfig | None = None) -> None:
    """
    Route structlog and stdlib logging to the console and, optionally, a file.

    Replaces any handlers on the root logger, so calling it again
    reconfigures cleanly.

    Args:
        config: Logging settings. If None, uses LoggingConfig defaults
            (console only, INFO).
    """
    global _configured
    config = config or LoggingConfig()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(config.level)
    console.setFormatter(_formatter(config.format))
    handlers: list[logging.Handler] = [console]

    if config.enable_file:
        handlers.append(_file_handler(config))

    logging.basicConfig(level=min(h.level for h in handlers), handlers=handlers, force=True)

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _configured = True


def is_configured() -> bool:
    """Check whether configure_logging has run since the last reset."""
    return _configured


def reset_logging() -> None:
    """Drop rjournal's handlers and restore structlog defaults (for tests)."""
    global _configured
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.WARNING)
    structlog.reset_defaults()
    _configured = False
