"""Logging setup shared by the scripts."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from elohero.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure the root logger from settings (arguments override)."""
    level = (level or settings.log_level).upper()
    log_format = (log_format or settings.log_format).lower()

    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    logging.basicConfig(level=level, handlers=[handler], force=True)
