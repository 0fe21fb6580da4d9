from __future__ import annotations

import logging
from enum import Enum
from threading import Lock

from .errors import AlreadyInitializedError
from .protocol import LevelFilter, LoggerProtocol, Metadata, Record

_LOGGER = logging.getLogger(__name__)


class RegistrationState(str, Enum):
    """Lifecycle of the global logger slot. ``REGISTERED`` is terminal."""

    UNREGISTERED = "Unregistered"
    REGISTERED = "Registered"


class NopLogger(LoggerProtocol):
    """Logger served before registration: rejects and drops everything."""

    def enabled(self, metadata: Metadata) -> bool:
        return False

    def log(self, record: Record) -> None:
        return None

    def flush(self) -> None:
        return None


_NOP_LOGGER = NopLogger()


class LoggerRegistry:
    """
    Single-assignment slot holding the process logger.

    - ``set_logger`` succeeds for exactly one caller; every later call raises
      :class:`AlreadyInitializedError` and leaves the slot untouched.
    - Reads never lock: once written, the slot is never written again.
    - There is no way to unregister.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._logger: LoggerProtocol | None = None
        self._max_level = LevelFilter.OFF

    @property
    def state(self) -> RegistrationState:
        if self._logger is None:
            return RegistrationState.UNREGISTERED
        return RegistrationState.REGISTERED

    def set_logger(self, logger: LoggerProtocol) -> None:
        with self._lock:
            if self._logger is not None:
                raise AlreadyInitializedError(state=self.state)
            self._logger = logger
        _LOGGER.debug("global logger registered: %s", type(logger).__name__)

    def logger(self) -> LoggerProtocol:
        installed = self._logger
        if installed is None:
            return _NOP_LOGGER
        return installed

    def max_level(self) -> LevelFilter:
        return self._max_level

    def set_max_level(self, level: LevelFilter) -> None:
        self._max_level = LevelFilter(level)


_default_registry = LoggerRegistry()


def get_registry() -> LoggerRegistry:
    return _default_registry
