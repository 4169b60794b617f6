from .domain.logging import LOG_LEVELS, LogMessage
from .sinks import LevelFilterSink, LogSink, MemoryLogSink, build_log_sink

__all__ = ["LOG_LEVELS", "LevelFilterSink", "LogMessage", "LogSink", "MemoryLogSink", "build_log_sink"]
