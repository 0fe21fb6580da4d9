from __future__ import annotations

import logging
import threading
import traceback

from ..protocol import Level, Metadata, Record
from ..registry import LoggerRegistry, get_registry
from .standard import ORIGIN_ATTR, record_fields


class StdlibBridgeHandler(logging.Handler):
    """
    Forwards stdlib ``logging`` records to the globally registered logger.

    Unlike regular handlers, the bridge does not serialize ``emit`` behind
    the handler lock; sinks are expected to be thread-safe. Records
    produced by :class:`~composite_log.impl.standard.HandlerSink` and
    records logged by a sink while it is being dispatched to are skipped.
    """

    def __init__(self, registry: LoggerRegistry | None = None) -> None:
        super().__init__(logging.NOTSET)
        self._registry = registry
        self._local = threading.local()

    def handle(self, record: logging.LogRecord) -> bool:
        rv = self.filter(record)
        if rv:
            self.emit(record)
        return bool(rv)

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(record, ORIGIN_ATTR, False):
            return
        if getattr(self._local, "active", False):
            return
        registry = self._registry or get_registry()
        level = Level.from_stdlib(record.levelno)
        if not registry.max_level().allows(level):
            return
        sink = registry.logger()
        if not sink.enabled(Metadata(level=level, target=record.name)):
            return
        try:
            converted = to_record(record, level=level)
        except Exception:
            self.handleError(record)
            return
        self._local.active = True
        try:
            sink.log(converted)
        finally:
            self._local.active = False

    def flush(self) -> None:
        (self._registry or get_registry()).logger().flush()


def to_record(record: logging.LogRecord, *, level: Level | None = None) -> Record:
    fields = record_fields(record)
    if record.exc_info and record.exc_info[0] is not None:
        fields["exception"] = "".join(
            traceback.format_exception(*record.exc_info)
        )
    return Record.build(
        level if level is not None else Level.from_stdlib(record.levelno),
        record.getMessage(),
        target=record.name,
        fields=fields,
        module_path=record.module,
        file=record.pathname,
        line=record.lineno,
    )


def install_stdlib_bridge(
    registry: LoggerRegistry | None = None,
) -> StdlibBridgeHandler:
    """
    Attach a bridge to the root logger and open it to every level.

    Calling this again returns the bridge already installed.
    """
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, StdlibBridgeHandler):
            return handler
    bridge = StdlibBridgeHandler(registry)
    root.addHandler(bridge)
    root.setLevel(logging.NOTSET)
    return bridge
