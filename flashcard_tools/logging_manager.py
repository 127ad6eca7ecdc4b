"""Centralized logging configuration for flashcard-tools.

All package loggers are children of ``flashcard_tools`` and emit one JSON
object per line. Values bound with :func:`log_context` (for example the term
being resolved) are copied onto every record emitted inside the block.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, Optional

LOGGER_NAME = "flashcard_tools"
DEFAULT_LOG_LEVEL = logging.INFO
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_logger: Optional[logging.Logger] = None
_file_handler: Optional[RotatingFileHandler] = None
_log_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "flashcard_tools_log_context", default={}
)

# Attributes present on every LogRecord; anything else came from ``extra``.
_RECORD_ATTRIBUTES = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class JSONLogFormatter(logging.Formatter):
    """Render log records as structured JSON strings."""

    TOP_LEVEL_FIELDS: tuple[str, ...] = ("term", "event", "source", "duration_ms", "status")

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra: Dict[str, object] = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or value is None:
                continue
            if key in self.TOP_LEVEL_FIELDS:
                payload[key] = value
            else:
                extra[key] = value
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class LogContextFilter(logging.Filter):
    """Copy the active :func:`log_context` values onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def _prepare_handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(JSONLogFormatter())
    handler.addFilter(LogContextFilter())
    return handler


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    *,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Configure the package logger, optionally adding a rotating file handler."""
    global _logger

    if _logger is None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.propagate = False
        logger.addHandler(_prepare_handler(logging.StreamHandler()))
        _logger = logger

    if log_file is not None:
        attach_file_handler(Path(log_file))

    configure_logging_level(log_level)
    return _logger


def attach_file_handler(log_file: Path) -> None:
    """Route log output to ``log_file`` as well, replacing any earlier file handler."""
    global _file_handler

    logger = get_logger()
    if _file_handler is not None:
        logger.removeHandler(_file_handler)
        _file_handler.close()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    _file_handler = RotatingFileHandler(
        log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    logger.addHandler(_prepare_handler(_file_handler))


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def configure_logging_level(log_level: int) -> None:
    """Set ``log_level`` on the package logger and its handlers."""
    logger = get_logger()
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Bind ``values`` to every record logged inside the block."""

    merged = dict(_log_context.get())
    merged.update({key: value for key, value in values.items() if value is not None})
    token = _log_context.set(merged)
    try:
        yield
    finally:
        _log_context.reset(token)


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "JSONLogFormatter",
    "LOGGER_NAME",
    "LogContextFilter",
    "attach_file_handler",
    "configure_logging_level",
    "get_logger",
    "log_context",
    "setup_logging",
]
