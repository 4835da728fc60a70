"""Structured JSON logging.

Every record is rendered as a single JSON object so the output can be
shipped as-is to log collectors. Records go to stdout and, when
`LOG_FILE_ENABLED` is set, are also appended to `LOG_FILE`.
"""

from __future__ import annotations

import json
import logging
import socket
import sys
from datetime import datetime, timezone

from .config import Settings

SERVICE_NAME = "school-fees-manager"

# attributes present on every LogRecord; anything else came from `extra=`
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}
_HANDLER_MARK = "_school_fees_handler"


class JsonFormatter(logging.Formatter):
    def __init__(self, env: str = "development"):
        super().__init__()
        self.env = env
        self.hostname = socket.gethostname()

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "hostname": self.hostname,
            "service": SERVICE_NAME,
            "env": self.env,
        }
        # extras never replace the core fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED and key not in entry and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=True, default=str)


def configure_logging(settings: Settings) -> None:
    """Install JSON handlers on the root logger.

    Calling this again replaces the handlers installed by a previous call
    instead of stacking duplicates.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    formatter = JsonFormatter(env=settings.APP_ENV)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_FILE_ENABLED:
        settings.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.LOG_FILE, mode="a", encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL)
