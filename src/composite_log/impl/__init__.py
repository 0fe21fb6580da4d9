from .bridge import StdlibBridgeHandler, install_stdlib_bridge, to_record
from .standard import (
    HandlerSink,
    JsonFormatter,
    build_file_sink,
    build_formatter,
    build_stream_sink,
    to_log_record,
)

__all__ = [
    "HandlerSink",
    "JsonFormatter",
    "StdlibBridgeHandler",
    "build_file_sink",
    "build_formatter",
    "build_stream_sink",
    "install_stdlib_bridge",
    "to_log_record",
    "to_record",
]
