"""Structured JSON logging for the chat AI bridge."""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, MutableMapping

from .config import DEFAULT_LOG_PATH

# Record attributes promoted to top-level JSON keys when passed via ``extra``
CONTEXT_FIELDS = ("channel_id", "cid", "message_id", "event_type")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if hasattr(record, "context"):
            entry["context"] = record.context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ChannelLoggerAdapter(logging.LoggerAdapter):
    """Stamps every record with the channel an agent is bound to."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def build_logging_config(log_level: str, log_file: str | None) -> dict:
    """Return a dictConfig mapping; file handler only when log_file is set."""
    handlers: dict[str, dict] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "chat_ai_bridge.logging_config.JSONFormatter",
            },
        },
        "handlers": handlers,
        "loggers": {
            # SDK request logs are noisy at INFO
            "httpx": {"level": "WARNING"},
            "openai": {"level": "WARNING"},
        },
        "root": {
            "level": log_level.upper(),
            "handlers": list(handlers),
        },
    }


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    console_only: bool = False,
) -> None:
    """
    Setup structured logging for the service.

    Args:
        log_level: Log level name. Defaults to LOG_LEVEL env var or INFO.
        log_file: Path to the rotating log file. Defaults to logs/app.log.
        console_only: Skip the file handler entirely.
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    if console_only:
        log_file = None
    else:
        if log_file is None:
            log_file = str(DEFAULT_LOG_PATH)
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(log_level, log_file))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically for ``__name__``)."""
    return logging.getLogger(name)


def get_channel_logger(name: str, channel_id: str) -> ChannelLoggerAdapter:
    """Get a logger that tags records with ``channel_id``."""
    return ChannelLoggerAdapter(logging.getLogger(name), {"channel_id": channel_id})
