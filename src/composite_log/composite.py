from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable

from .errors import AlreadyInitializedError, CompositeLogError
from .protocol import LevelFilter, LoggerProtocol, Metadata, Record
from .registry import LoggerRegistry, get_registry

_LOGGER = logging.getLogger(__name__)

_INIT_FAILURE_MESSAGE = (
    "CompositeLogger.init should not be called after logger initialized"
)


def _abort(message: str) -> None:
    sys.stderr.write(f"{message}\n")
    sys.stderr.flush()
    os.abort()


class CompositeLogger(LoggerProtocol):
    """
    Fan-out logger delegating every event to an ordered list of sinks.

    Built fluently and consumed by each step::

        CompositeLogger.new().with_logger(console).with_logger(shipper).init()

    ``with_logger``, ``try_init`` and ``init`` consume the receiver; calling
    any of them again on a consumed value raises :class:`CompositeLogError`.
    The sink sequence of a value never changes, so a registered composite
    is safe to share across threads without locking.
    """

    def __init__(self, sinks: Iterable[LoggerProtocol] = ()) -> None:
        self._sinks: tuple[LoggerProtocol, ...] = tuple(sinks)
        self._consumed = False

    @classmethod
    def new(cls) -> "CompositeLogger":
        return cls()

    @property
    def sinks(self) -> tuple[LoggerProtocol, ...]:
        return self._sinks

    def __len__(self) -> int:
        return len(self._sinks)

    def __repr__(self) -> str:
        names = ", ".join(type(sink).__name__ for sink in self._sinks)
        return f"CompositeLogger([{names}])"

    def with_logger(self, logger: LoggerProtocol) -> "CompositeLogger":
        """Add a logger to delegate the logs to."""
        self._consume("with_logger")
        return CompositeLogger((*self._sinks, logger))

    def try_init(self, *, registry: LoggerRegistry | None = None) -> None:
        """
        Install this composite as the global logger.

        On success the global threshold is opened to ``LevelFilter.max()``
        so that filtering is left entirely to the sinks. Any events logged
        before this call were dropped.

        :raises AlreadyInitializedError: if a logger is already registered
            in ``registry``. The composite is discarded and the existing
            registration is left as it was.
        """
        self._consume("try_init")
        target = registry or get_registry()
        try:
            target.set_logger(self)
        except AlreadyInitializedError:
            _LOGGER.warning(
                "composite logger with %d sink(s) rejected: %s",
                len(self._sinks),
                target.state.value,
            )
            raise
        target.set_max_level(LevelFilter.max())

    def init(self, *, registry: LoggerRegistry | None = None) -> None:
        """
        Install this composite as the global logger or abort the process.

        Same as :meth:`try_init`, except that a second registration is
        treated as a programming error and terminates the interpreter
        immediately.
        """
        try:
            self.try_init(registry=registry)
        except AlreadyInitializedError as exc:
            _abort(f"{_INIT_FAILURE_MESSAGE}: {exc}")

    def enabled(self, metadata: Metadata) -> bool:
        return any(sink.enabled(metadata) for sink in self._sinks)

    def log(self, record: Record) -> None:
        metadata = record.metadata
        for sink in self._sinks:
            if sink.enabled(metadata):
                sink.log(record)

    def flush(self) -> None:
        for sink in self._sinks:
            sink.flush()

    def _consume(self, operation: str) -> None:
        if self._consumed:
            raise CompositeLogError(
                f"CompositeLogger.{operation} called on a consumed builder"
            )
        self._consumed = True
