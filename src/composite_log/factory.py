from __future__ import annotations

from collections.abc import Iterable

from .composite import CompositeLogger
from .impl.bridge import install_stdlib_bridge
from .impl.standard import build_file_sink, build_formatter, build_stream_sink
from .protocol import Level, LoggerProtocol
from .registry import LoggerRegistry
from .settings import LoggingSettings, load_logging_settings


def build_composite_logger(
    settings: LoggingSettings | None = None,
    *,
    sinks: Iterable[LoggerProtocol] = (),
) -> CompositeLogger:
    """Caller sinks first, then the sinks enabled in ``settings``."""
    resolved = settings or load_logging_settings()
    composite = CompositeLogger.new()
    for sink in sinks:
        composite = composite.with_logger(sink)
    for sink in _build_configured_sinks(resolved):
        composite = composite.with_logger(sink)
    return composite


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    sinks: Iterable[LoggerProtocol] = (),
    registry: LoggerRegistry | None = None,
) -> CompositeLogger:
    """
    Build a composite from ``settings`` and register it globally.

    :raises AlreadyInitializedError: if a logger is already registered.
    """
    resolved = settings or load_logging_settings()
    composite = build_composite_logger(resolved, sinks=sinks)
    composite.try_init(registry=registry)
    if resolved.capture_stdlib:
        install_stdlib_bridge(registry)
    return composite


def _build_configured_sinks(settings: LoggingSettings) -> list[LoggerProtocol]:
    formatter = build_formatter(json_format=settings.json_format)
    sinks: list[LoggerProtocol] = []
    if settings.console_enabled:
        sinks.append(build_stream_sink(level=settings.level, formatter=formatter))

    if settings.error_dir:
        sinks.append(
            build_file_sink(
                settings.error_dir,
                "error.log",
                level=Level.ERROR,
                formatter=formatter,
                rotate_when=settings.rotate_when,
                backup_count=settings.backup_count,
            )
        )

    if settings.general_enabled and settings.general_dir:
        sinks.append(
            build_file_sink(
                settings.general_dir,
                "service.log",
                level=settings.level,
                formatter=formatter,
                rotate_when=settings.rotate_when,
                backup_count=settings.backup_count,
            )
        )

    return sinks
