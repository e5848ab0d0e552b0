"""Configuration for the tax engine."""

from .logging_config import ContextLogger, JsonFormatter, ReadableFormatter, configure_logging, get_logger
from .settings import EngineSettings, get_settings

__all__ = [
    "EngineSettings",
    "get_settings",
    "JsonFormatter",
    "ReadableFormatter",
    "configure_logging",
    "ContextLogger",
    "get_logger",
]
