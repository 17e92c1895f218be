"""Logging configuration for the printquote backend."""
import json
import logging
import sys
from datetime import datetime, timezone

# set through ``extra=`` by the request middleware and services
_EXTRA_FIELDS = ("request_id", "user_id", "http_method", "http_path", "http_status", "duration_ms")

_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "aiosqlite")


class JSONFormatter(logging.Formatter):
    """One JSON object per log line, for container log collectors."""

    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Install a single stdout handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s"))
    root.handlers = [handler]

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
