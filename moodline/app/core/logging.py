from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .config import get_settings


class JsonFormatter(logging.Formatter):
    """Serialize log records as JSON, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in ("request_id", "path", "method", "status", "duration_ms", "op"):
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            payload.update(extra_fields)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _handler(handler: logging.Handler, level: str, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging() -> None:
    """Install the JSON file and console handlers on the root logger once.

    The file receives records at ``LOG_LEVEL`` and the console at
    ``CONSOLE_LOG_LEVEL``; the root logger passes the lower of the two.
    """

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    settings = get_settings()
    log_path: Path = settings.log_file
    formatter = JsonFormatter()

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    root_logger.addHandler(_handler(file_handler, settings.log_level, formatter))
    root_logger.addHandler(_handler(logging.StreamHandler(), settings.console_log_level, formatter))

    levels = logging.getLevelNamesMapping()
    root_logger.setLevel(min(levels[settings.log_level], levels[settings.console_log_level]))
