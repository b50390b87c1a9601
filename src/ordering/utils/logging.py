"""Logging configuration for the ordering domain.

structlog renders through the standard library root logger, which writes to
stdout and to two rotating files (everything, and errors only). Production
and staging emit JSON lines; other environments get the coloured console
renderer with rich tracebacks.
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

_LEVEL_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVIRONMENTS = {"production", "staging"}
_NOISY_LOGGERS = ("urllib3", "asyncio", "protean")

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


@dataclass(frozen=True)
class LoggingSettings:
    environment: str
    level: str
    log_dir: Path

    @classmethod
    def from_env(cls, log_dir: str | None = None) -> "LoggingSettings":
        environment = (
            os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development"
        ).lower()
        return cls(
            environment=environment,
            level=os.getenv("LOG_LEVEL", _LEVEL_BY_ENVIRONMENT.get(environment, "INFO")).upper(),
            log_dir=Path(log_dir or os.getenv("LOG_DIR", "logs")),
        )

    @property
    def json_output(self) -> bool:
        return self.environment in _JSON_ENVIRONMENTS


def _rotating_handler(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def _install_handlers(settings: LoggingSettings, log_file_prefix: str) -> None:
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(settings.level)

    root = logging.getLogger()
    root.setLevel(settings.level)
    root.handlers = [
        console,
        _rotating_handler(settings.log_dir / f"{log_file_prefix}.log", settings.level),
        _rotating_handler(settings.log_dir / f"{log_file_prefix}_error.log", logging.ERROR),
    ]

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _processors(settings: LoggingSettings) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
    ]
    if settings.json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        formatter = structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2)
        processors.append(structlog.dev.ConsoleRenderer(colors=True, exception_formatter=formatter))
    return processors


def configure_logging(
    log_dir: str | None = None,
    log_file_prefix: str = "ordering",
    settings: LoggingSettings | None = None,
) -> LoggingSettings:
    """Configure stdlib handlers and structlog; returns the settings used."""
    settings = settings or LoggingSettings.from_env(log_dir)
    _install_handlers(settings, log_file_prefix)
    structlog.configure(
        processors=_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind key-values to every log line emitted until ``clear_context``."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
