"""
Logging configuration for the tax engine.

Records carry their context (tax year, state, finding code) in
``extra_data``; both formatters render it.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

from config.settings import EngineSettings, get_settings


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    return dict(getattr(record, "extra_data", None) or {})


class JsonFormatter(logging.Formatter):
    """One JSON object per record with the context fields at top level."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(_context(record))
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class ReadableFormatter(logging.Formatter):
    """``time LEVEL [logger] message | key=value ...``"""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)-8s [%(name)s] %(message)s", datefmt="%H:%M:%S")

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = _context(record)
        if context:
            line += " | " + " ".join(f"{k}={v}" for k, v in context.items())
        return line


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
    settings: Optional[EngineSettings] = None,
) -> None:
    """
    Configure root logging for the engine.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to settings.
        json_output: If True, output JSON formatted logs. Defaults to settings.
        settings: Settings to read defaults from; ``get_settings()`` when omitted
    """
    settings = settings or get_settings()
    level = (level or settings.log_level).upper()
    if json_output is None:
        json_output = settings.log_json

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_output else ReadableFormatter())
    root_logger.addHandler(handler)


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that merges fixed context (tax year, state, ...) into the
    ``extra_data`` of every record it emits.
    """

    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        merged = {k: v for k, v in self.extra.items() if v is not None}
        merged.update(extra.get("extra_data", {}))
        extra["extra_data"] = merged
        return msg, kwargs


def get_logger(name: str, **context) -> ContextLogger:
    """
    Get a logger that tags every record with ``context``.

    ``None`` values are dropped so callers can pass optional context as-is.
    """
    return ContextLogger(logging.getLogger(name), context)
