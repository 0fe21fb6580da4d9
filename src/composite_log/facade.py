"""Call-site API routed through the globally registered logger.

Nothing here holds state of its own: every call reads the process-wide
registry, so events logged before registration are silently dropped.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping

from .protocol import Level, LevelFilter, LoggerProtocol, Metadata, Record
from .registry import get_registry


def logger() -> LoggerProtocol:
    return get_registry().logger()


def max_level() -> LevelFilter:
    return get_registry().max_level()


def set_max_level(level: LevelFilter) -> None:
    get_registry().set_max_level(level)


def log_enabled(level: Level, target: str | None = None) -> bool:
    resolved = Level(level)
    registry = get_registry()
    if not registry.max_level().allows(resolved):
        return False
    if target is None:
        target = sys._getframe(1).f_globals.get("__name__", "__main__")
    return registry.logger().enabled(Metadata(level=resolved, target=target))


def flush() -> None:
    get_registry().logger().flush()


def log(
    level: Level,
    message: str,
    *args: object,
    target: str | None = None,
    fields: Mapping[str, object] | None = None,
    stacklevel: int = 1,
    **kw_fields: object,
) -> None:
    _emit(Level(level), message, args, target, fields, kw_fields, stacklevel)


def error(
    message: str,
    *args: object,
    target: str | None = None,
    fields: Mapping[str, object] | None = None,
    stacklevel: int = 1,
    **kw_fields: object,
) -> None:
    _emit(Level.ERROR, message, args, target, fields, kw_fields, stacklevel)


def warn(
    message: str,
    *args: object,
    target: str | None = None,
    fields: Mapping[str, object] | None = None,
    stacklevel: int = 1,
    **kw_fields: object,
) -> None:
    _emit(Level.WARN, message, args, target, fields, kw_fields, stacklevel)


warning = warn


def info(
    message: str,
    *args: object,
    target: str | None = None,
    fields: Mapping[str, object] | None = None,
    stacklevel: int = 1,
    **kw_fields: object,
) -> None:
    _emit(Level.INFO, message, args, target, fields, kw_fields, stacklevel)


def debug(
    message: str,
    *args: object,
    target: str | None = None,
    fields: Mapping[str, object] | None = None,
    stacklevel: int = 1,
    **kw_fields: object,
) -> None:
    _emit(Level.DEBUG, message, args, target, fields, kw_fields, stacklevel)


def trace(
    message: str,
    *args: object,
    target: str | None = None,
    fields: Mapping[str, object] | None = None,
    stacklevel: int = 1,
    **kw_fields: object,
) -> None:
    _emit(Level.TRACE, message, args, target, fields, kw_fields, stacklevel)


def _emit(
    level: Level,
    message: str,
    args: tuple[object, ...],
    target: str | None,
    fields: Mapping[str, object] | None,
    kw_fields: Mapping[str, object],
    stacklevel: int,
) -> None:
    registry = get_registry()
    if not registry.max_level().allows(level):
        return
    # frame 0 is _emit, frame 1 the public wrapper, frame 2 its caller
    frame = sys._getframe(stacklevel + 1)
    module_name = frame.f_globals.get("__name__", "__main__")
    metadata = Metadata(level=level, target=target or module_name)
    sink = registry.logger()
    if not sink.enabled(metadata):
        return
    merged: dict[str, object] = dict(fields) if fields else {}
    merged.update(kw_fields)
    sink.log(
        Record.build(
            level,
            _format_message(message, args),
            target=metadata.target,
            fields=merged,
            module_path=module_name,
            file=frame.f_code.co_filename,
            line=frame.f_lineno,
        )
    )


def _format_message(message: str, args: tuple[object, ...]) -> str:
    if not args:
        return message
    values: object = args
    # a lone mapping feeds %(name)s placeholders, as in stdlib LogRecord
    if len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
        values = args[0]
    try:
        return message % values
    except (TypeError, ValueError, KeyError):
        return f"{message} {args!r}"
