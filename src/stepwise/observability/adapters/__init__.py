from .logging import (
    JsonlLogSink,
    LogSinkSpec,
    StreamLogSink,
    available_log_sinks,
    create_log_sink,
    jsonl_sink,
    log_sink,
    stdout_sink,
)

__all__ = [
    "JsonlLogSink",
    "LogSinkSpec",
    "StreamLogSink",
    "available_log_sinks",
    "create_log_sink",
    "jsonl_sink",
    "log_sink",
    "stdout_sink",
]
