from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

# attributes every LogRecord has; anything else came in through ``extra=``
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _extras(record: logging.LogRecord) -> dict:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED}


class TextFormatter(logging.Formatter):
    """``[ts] LEVEL: name - message {extra...}``"""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        line = f"[{ts}] {record.levelname}: {record.name} - {record.getMessage()}"
        data = _extras(record)
        if data:
            line += " " + json.dumps(data, default=str)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extras(record))
        if record.exc_info:
            payload["stack"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ServiceHandler(logging.StreamHandler):
    """Marker subclass so a later configure_logging() call can find and reuse it."""


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    """
    Install (or update) the service's stderr handler on the root logger.
    Calling it again swaps the formatter and level in place; other handlers
    on the root logger are left alone.
    """
    formatter = JsonFormatter() if fmt == "json" else TextFormatter()
    root = logging.getLogger()

    for handler in root.handlers:
        if isinstance(handler, ServiceHandler):
            handler.setFormatter(formatter)
            break
    else:
        handler = ServiceHandler()
        handler.setFormatter(formatter)
        if root.handlers:
            root.addHandler(handler)
        else:
            logging.basicConfig(handlers=[handler])

    root.setLevel(level)
