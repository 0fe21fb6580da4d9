"""Public API entry point for composite_log.

Use this module for supported imports. ``composite_log.impl`` holds the
standard-library adapters.
"""

from .composite import CompositeLogger
from .errors import AlreadyInitializedError, CompositeLogError
from .facade import (
    debug,
    error,
    flush,
    info,
    log,
    log_enabled,
    logger,
    max_level,
    set_max_level,
    trace,
    warn,
    warning,
)
from .factory import build_composite_logger, configure_logging
from .impl import HandlerSink, JsonFormatter, StdlibBridgeHandler, install_stdlib_bridge
from .protocol import Level, LevelFilter, LoggerProtocol, Metadata, Record
from .registry import LoggerRegistry, NopLogger, RegistrationState, get_registry
from .settings import LoggingSettings, load_logging_settings

__all__ = [
    "CompositeLogger",
    "LoggerProtocol",
    "Level",
    "LevelFilter",
    "Metadata",
    "Record",
    "CompositeLogError",
    "AlreadyInitializedError",
    "LoggerRegistry",
    "NopLogger",
    "RegistrationState",
    "get_registry",
    "log",
    "error",
    "warn",
    "warning",
    "info",
    "debug",
    "trace",
    "log_enabled",
    "flush",
    "logger",
    "max_level",
    "set_max_level",
    "HandlerSink",
    "JsonFormatter",
    "StdlibBridgeHandler",
    "install_stdlib_bridge",
    "LoggingSettings",
    "load_logging_settings",
    "build_composite_logger",
    "configure_logging",
]
