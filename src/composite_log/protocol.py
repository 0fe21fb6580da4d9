from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Protocol, runtime_checkable

_EMPTY_FIELDS: Mapping[str, object] = MappingProxyType({})


class Level(IntEnum):
    """Severity of a log event. Values match the stdlib ``logging`` levels."""

    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def from_stdlib(cls, levelno: int) -> "Level":
        """Map a stdlib level number to the nearest level at or below it."""
        for level in sorted(cls, reverse=True):
            if levelno >= level:
                return level
        return cls.TRACE

    def to_stdlib(self) -> int:
        return int(self)


class LevelFilter(IntEnum):
    """Threshold for log events; ``OFF`` rejects everything."""

    OFF = logging.CRITICAL + 10
    ERROR = Level.ERROR.value
    WARN = Level.WARN.value
    INFO = Level.INFO.value
    DEBUG = Level.DEBUG.value
    TRACE = Level.TRACE.value

    @classmethod
    def max(cls) -> "LevelFilter":
        """The least restrictive filter."""
        return cls.TRACE

    def allows(self, level: Level) -> bool:
        return int(level) >= int(self)


@dataclass(frozen=True, slots=True)
class Metadata:
    """Attributes of a prospective log event used for filtering."""

    level: Level
    target: str


@dataclass(frozen=True, slots=True)
class Record:
    """A realized log event handed to sinks."""

    metadata: Metadata
    message: str
    fields: Mapping[str, object] = field(default_factory=lambda: _EMPTY_FIELDS)
    module_path: str | None = None
    file: str | None = None
    line: int | None = None

    @property
    def level(self) -> Level:
        return self.metadata.level

    @property
    def target(self) -> str:
        return self.metadata.target

    @classmethod
    def build(
        cls,
        level: Level,
        message: str,
        *,
        target: str,
        fields: Mapping[str, object] | None = None,
        module_path: str | None = None,
        file: str | None = None,
        line: int | None = None,
    ) -> "Record":
        return cls(
            metadata=Metadata(level=level, target=target),
            message=message,
            fields=MappingProxyType(dict(fields)) if fields else _EMPTY_FIELDS,
            module_path=module_path,
            file=file,
            line=line,
        )


@runtime_checkable
class LoggerProtocol(Protocol):
    """
    Capability contract shared by sinks and the composite logger.

    ``enabled`` must be free of side effects and must not depend on other
    sinks having been queried first; callers may skip it or call it more
    than once per event. ``log`` and ``flush`` never report failures to the
    caller: a sink that needs to surface errors does so on its own channel.
    """

    def enabled(self, metadata: Metadata) -> bool: ...

    def log(self, record: Record) -> None: ...

    def flush(self) -> None: ...
