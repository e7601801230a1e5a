"""
Logging setup for the Frontline pricing engine.

Library modules only create named loggers under ``frontline-pricing``;
handlers are installed by the process entry point (``frontline.main``)
through ``setup_logging_from_env``.
"""
import logging
import json
import sys
from datetime import datetime, timezone

ROOT_LOGGER = "frontline-pricing"

# Quote context attached with ``extra=`` by the session and the engines
_QUOTE_FIELDS = ("event", "family", "size", "last_edited")

_TEXT_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line; quote context fields are copied when present."""

    def format(self, record):
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        payload.update(
            {name: getattr(record, name) for name in _QUOTE_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level: str = "INFO", json_output: bool = True):
    """Install a single stdout handler on the root logger."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(_TEXT_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))


def setup_logging_from_env():
    """Configure logging from LOG_LEVEL / LOG_FORMAT (see ``frontline.config``)."""
    from frontline import config
    setup_logging(level=config.LOG_LEVEL, json_output=config.LOG_JSON)
