from __future__ import annotations

import json
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO, TypeVar

from stepwise.observability.domain.logging import LogMessage

F = TypeVar("F", bound=Callable[[dict[str, object]], object])


@dataclass(frozen=True, slots=True)
class LogSinkSpec:
    # Registered sink factory: config name, accepted setting keys, constructor.
    name: str
    settings: tuple[str, ...]
    factory: Callable[[dict[str, object]], object]


_REGISTRY: dict[str, LogSinkSpec] = {}


def log_sink(name: str, *, settings: tuple[str, ...] = ()) -> Callable[[F], F]:
    # Registers a sink factory under the name used by logging.sink in config.
    def _register(factory: F) -> F:
        if name in _REGISTRY and _REGISTRY[name].factory is not factory:
            raise ValueError(f"Duplicate log sink name: {name}")
        _REGISTRY[name] = LogSinkSpec(name=name, settings=settings, factory=factory)
        return factory

    return _register


def available_log_sinks() -> dict[str, LogSinkSpec]:
    return dict(_REGISTRY)


def create_log_sink(name: str, settings: dict[str, object]) -> object:
    # Only the settings a sink declares are passed through.
    spec = _REGISTRY.get(name)
    if spec is None:
        raise ValueError(f"Unknown log sink: {name}")
    return spec.factory({key: settings[key] for key in spec.settings if key in settings})


def _encode(message: LogMessage) -> str:
    return json.dumps(message.as_record(), separators=(",", ":"), ensure_ascii=False, default=str)


class StreamLogSink:
    # JSON lines on a text stream; sys.stdout is looked up at emit time when none is given.
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def emit(self, message: LogMessage) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(_encode(message) + "\n")

    def close(self) -> None:
        return None


class JsonlLogSink:
    # Appends to a file, flushing each line.
    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._path = path
        self._file = path.open("a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, message: LogMessage) -> None:
        self._file.write(_encode(message) + "\n")
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


@log_sink("stdout")
def stdout_sink(settings: dict[str, object]) -> StreamLogSink:
    return StreamLogSink()


@log_sink("jsonl", settings=("path",))
def jsonl_sink(settings: dict[str, object]) -> JsonlLogSink:
    path = settings.get("path")
    if not isinstance(path, str) or not path:
        raise ValueError("The jsonl log sink needs a non-empty 'path' setting")
    return JsonlLogSink(Path(path))
