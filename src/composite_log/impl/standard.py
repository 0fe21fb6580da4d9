from __future__ import annotations

import json
import logging
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from ..protocol import Level, LoggerProtocol, Metadata, Record

ORIGIN_ATTR = "_composite_log_origin"

# attributes every LogRecord carries on this interpreter, plus the ones
# Formatter.format adds
BUILTIN_LOG_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime", ORIGIN_ATTR}

logging.addLevelName(Level.TRACE.to_stdlib(), "TRACE")


def record_fields(record: logging.LogRecord) -> dict[str, object]:
    """Structured fields attached to a stdlib record through ``extra``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in BUILTIN_LOG_RECORD_ATTRS
    }


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    Fields whose names clash with a payload key are written as
    ``field_<name>`` so they never mask the severity or the target.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "target": record.name,
            "message": record.getMessage(),
            "process": record.process,
            "thread": record.threadName,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)
        for key, value in record_fields(record).items():
            payload[f"field_{key}" if key in payload else key] = value
        return json.dumps(payload, ensure_ascii=True, default=str)


PLAIN_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"


class HandlerSink(LoggerProtocol):
    """
    Adapts a stdlib ``logging.Handler`` to the sink contract.

    The sink accepts events at or above ``level`` (the handler's own level
    when omitted) whose target equals ``target_prefix`` or sits below it in
    the dotted module hierarchy. Errors raised while emitting are routed to
    ``Handler.handleError`` and never reach the caller.
    """

    def __init__(
        self,
        handler: logging.Handler,
        *,
        level: Level | None = None,
        target_prefix: str | None = None,
    ) -> None:
        self._handler = handler
        self._level = level if level is not None else Level.from_stdlib(
            handler.level
        )
        self._target_prefix = target_prefix

    @property
    def handler(self) -> logging.Handler:
        return self._handler

    @property
    def level(self) -> Level:
        return self._level

    def enabled(self, metadata: Metadata) -> bool:
        if metadata.level < self._level:
            return False
        prefix = self._target_prefix
        if prefix is None:
            return True
        return metadata.target == prefix or metadata.target.startswith(
            f"{prefix}."
        )

    def log(self, record: Record) -> None:
        log_record = to_log_record(record)
        try:
            self._handler.handle(log_record)
        except Exception:
            self._handler.handleError(log_record)

    def flush(self) -> None:
        self._handler.flush()

    def __repr__(self) -> str:
        return (
            f"HandlerSink({type(self._handler).__name__}, "
            f"level={self._level.name}, target_prefix={self._target_prefix!r})"
        )


def to_log_record(record: Record) -> logging.LogRecord:
    log_record = logging.LogRecord(
        name=record.target,
        level=record.level.to_stdlib(),
        pathname=record.file or "",
        lineno=record.line or 0,
        msg=record.message,
        args=None,
        exc_info=None,
    )
    for key, value in record.fields.items():
        if key in BUILTIN_LOG_RECORD_ATTRS:
            key = f"field_{key}"
        setattr(log_record, key, value)
    setattr(log_record, ORIGIN_ATTR, True)
    return log_record


def build_formatter(*, json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonFormatter()
    return logging.Formatter(PLAIN_FORMAT)


def build_stream_sink(
    *,
    level: Level,
    formatter: logging.Formatter,
) -> HandlerSink:
    handler = logging.StreamHandler()
    handler.setLevel(level.to_stdlib())
    handler.setFormatter(formatter)
    return HandlerSink(handler, level=level)


def build_file_sink(
    directory: str,
    filename: str,
    *,
    level: Level,
    formatter: logging.Formatter,
    rotate_when: str,
    backup_count: int,
) -> HandlerSink:
    """Rotating file sink; the file is opened on the first accepted record."""
    folder = Path(directory)
    folder.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        folder / filename,
        when=rotate_when,
        backupCount=backup_count,
        encoding="utf-8",
        delay=True,
    )
    handler.setFormatter(formatter)
    return HandlerSink(handler, level=level)
