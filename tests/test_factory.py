import json
import logging
from pathlib import Path

import pytest

from composite_log import (
    AlreadyInitializedError,
    CompositeLogger,
    HandlerSink,
    Level,
    LevelFilter,
    LoggerProtocol,
    LoggerRegistry,
    LoggingSettings,
    Metadata,
    Record,
    build_composite_logger,
    configure_logging,
)


class _Sink(LoggerProtocol):
    def __init__(self) -> None:
        self.records: list[Record] = []

    def enabled(self, metadata: Metadata) -> bool:
        return True

    def log(self, record: Record) -> None:
        self.records.append(record)

    def flush(self) -> None:
        return None


def _settings(tmp_path: Path, **overrides: object) -> LoggingSettings:
    values: dict[str, object] = {
        "console_enabled": False,
        "error_dir": str(tmp_path / "error"),
        "general_enabled": True,
        "general_dir": str(tmp_path / "general"),
        "level": Level.DEBUG,
        "capture_stdlib": False,
    }
    values.update(overrides)
    return LoggingSettings(**values)


def test_build_puts_caller_sinks_first(tmp_path: Path) -> None:
    caller = _Sink()
    composite = build_composite_logger(_settings(tmp_path), sinks=[caller])

    assert composite.sinks[0] is caller
    configured = composite.sinks[1:]
    assert all(isinstance(sink, HandlerSink) for sink in configured)
    assert [sink.level for sink in configured] == [Level.ERROR, Level.DEBUG]


def test_build_without_configured_sinks(tmp_path: Path) -> None:
    settings = _settings(tmp_path, error_dir=None, general_enabled=False)

    composite = build_composite_logger(settings)

    assert len(composite) == 0


def test_build_with_console_sink(tmp_path: Path) -> None:
    settings = _settings(
        tmp_path,
        console_enabled=True,
        error_dir=None,
        general_enabled=False,
        level=Level.WARN,
    )

    composite = build_composite_logger(settings)

    (console,) = composite.sinks
    assert isinstance(console, HandlerSink)
    assert isinstance(console.handler, logging.StreamHandler)
    assert console.level is Level.WARN


def test_configure_logging_registers_and_routes(tmp_path: Path) -> None:
    registry = LoggerRegistry()
    recorder = _Sink()

    composite = configure_logging(
        _settings(tmp_path), sinks=[recorder], registry=registry
    )
    composite.log(Record.build(Level.INFO, "general only", target="app"))
    composite.log(Record.build(Level.ERROR, "both files", target="app"))
    composite.flush()
    for sink in composite.sinks[1:]:
        assert isinstance(sink, HandlerSink)
        sink.handler.close()

    assert registry.logger() is composite
    assert registry.max_level() is LevelFilter.TRACE
    assert [r.message for r in recorder.records] == ["general only", "both files"]
    error_lines = (tmp_path / "error" / "error.log").read_text("utf-8")
    general_lines = (tmp_path / "general" / "service.log").read_text("utf-8")
    assert [json.loads(line)["message"] for line in error_lines.splitlines()] == [
        "both files"
    ]
    assert [
        json.loads(line)["message"] for line in general_lines.splitlines()
    ] == ["general only", "both files"]


def test_configure_logging_twice_raises(tmp_path: Path) -> None:
    registry = LoggerRegistry()
    settings = _settings(tmp_path, error_dir=None, general_enabled=False)
    first = configure_logging(settings, registry=registry)

    with pytest.raises(AlreadyInitializedError):
        configure_logging(settings, registry=registry)
    assert registry.logger() is first


def test_configure_logging_installs_bridge(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    registry = LoggerRegistry()
    recorder = _Sink()
    try:
        configure_logging(
            _settings(
                tmp_path,
                error_dir=None,
                general_enabled=False,
                capture_stdlib=True,
            ),
            sinks=[recorder],
            registry=registry,
        )
        logging.getLogger("factory.tests").info("via stdlib")
    finally:
        for handler in list(root.handlers):
            if handler not in saved_handlers:
                root.removeHandler(handler)
        root.setLevel(saved_level)

    assert any(
        r.message == "via stdlib" and r.target == "factory.tests"
        for r in recorder.records
    )


def test_built_composite_is_a_composite_logger(tmp_path: Path) -> None:
    settings = _settings(tmp_path, error_dir=None, general_enabled=False)

    assert isinstance(build_composite_logger(settings), CompositeLogger)
