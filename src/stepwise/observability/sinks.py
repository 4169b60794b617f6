from __future__ import annotations

from typing import Protocol, runtime_checkable

from stepwise.observability.adapters.logging import create_log_sink
from stepwise.observability.domain.logging import LOG_LEVELS, LogMessage, level_at_least


# LogSink is the port every log adapter satisfies.
@runtime_checkable
class LogSink(Protocol):
    def emit(self, message: LogMessage) -> None:
        """Consume one LogMessage."""
        raise NotImplementedError("LogSink is a port; use a concrete adapter.")


class LevelFilterSink:
    # Drops messages below the configured threshold before delegating.
    def __init__(self, inner: LogSink, *, level: str = "info") -> None:
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of: {list(LOG_LEVELS)}")
        self._inner = inner
        self._level = level

    @property
    def inner(self) -> LogSink:
        return self._inner

    def emit(self, message: LogMessage) -> None:
        if level_at_least(message.level, self._level):
            self._inner.emit(message)

    def close(self) -> None:
        close = getattr(self._inner, "close", None)
        if callable(close):
            close()


class MemoryLogSink:
    # Keeps messages in order; used by embedders and tests that inspect engine logs.
    def __init__(self) -> None:
        self.messages: list[LogMessage] = []

    def emit(self, message: LogMessage) -> None:
        self.messages.append(message)

    def close(self) -> None:
        return None


def build_log_sink(sink: str, *, path: str | None = None, level: str = "info") -> LevelFilterSink | None:
    # Resolves a configured sink name to a registered sink; "none" disables logging.
    if sink == "none":
        return None
    settings: dict[str, object] = {}
    if path is not None:
        settings["path"] = path
    inner = create_log_sink(sink, settings)
    if not isinstance(inner, LogSink):
        raise TypeError(f"Log sink '{sink}' does not provide emit()")
    return LevelFilterSink(inner, level=level)
