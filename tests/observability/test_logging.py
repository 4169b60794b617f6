from __future__ import annotations

import io
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from stepwise.engine.descriptor import UniqueId, step_descriptor
from stepwise.engine.listener import ExecutionResult, LoggingListener
from stepwise.kernel.step import Step
from stepwise.observability.adapters.logging import (
    JsonlLogSink,
    StreamLogSink,
    available_log_sinks,
    create_log_sink,
    log_sink,
)
from stepwise.observability.domain.logging import LogMessage, level_at_least
from stepwise.observability.sinks import LevelFilterSink, MemoryLogSink, build_log_sink


def test_log_message_validates_level() -> None:
    with pytest.raises(ValueError):
        LogMessage(level="verbose", message="x")
    with pytest.raises(ValueError):
        LogMessage(level="info", message="")


def test_level_ordering() -> None:
    assert level_at_least("error", "warning")
    assert not level_at_least("debug", "info")


def test_record_timestamp_is_utc() -> None:
    # Offsets are normalized to UTC and rendered with "Z".
    local = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    record = LogMessage(level="info", message="x", timestamp=local).as_record()
    assert record["timestamp"] == "2024-05-01T10:00:00Z"


def test_stream_sink_writes_json_lines() -> None:
    # One JSON object per message.
    stream = io.StringIO()
    StreamLogSink(stream).emit(LogMessage(level="info", message="discovery finished", fields={"steps": 3}))
    payload = json.loads(stream.getvalue())
    assert payload["message"] == "discovery finished"
    assert payload["fields"] == {"steps": 3}
    assert payload["timestamp"].endswith("Z")


def test_jsonl_sink_appends(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "run.jsonl"
    sink = JsonlLogSink(path)
    sink.emit(LogMessage(level="info", message="first"))
    sink.emit(LogMessage(level="error", message="second"))
    sink.close()
    sink.close()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["message"] for line in lines] == ["first", "second"]


def test_level_filter_drops_lower_levels() -> None:
    inner = MemoryLogSink()
    sink = LevelFilterSink(inner, level="warning")
    sink.emit(LogMessage(level="info", message="dropped"))
    sink.emit(LogMessage(level="error", message="kept"))
    assert [message.message for message in inner.messages] == ["kept"]


def test_registered_sinks() -> None:
    # Sinks are looked up by their config name.
    sinks = available_log_sinks()
    assert {"stdout", "jsonl"} <= set(sinks)
    assert sinks["jsonl"].settings == ("path",)
    assert isinstance(create_log_sink("stdout", {"path": "ignored.jsonl"}), StreamLogSink)
    with pytest.raises(ValueError):
        create_log_sink("syslog", {})


def test_duplicate_sink_names_fail() -> None:
    # A different factory cannot take over a registered name.
    with pytest.raises(ValueError):

        @log_sink("stdout")
        def other(settings: dict[str, object]) -> MemoryLogSink:
            return MemoryLogSink()


def test_build_log_sink(tmp_path: Path) -> None:
    assert build_log_sink("none") is None
    sink = build_log_sink("jsonl", path=str(tmp_path / "out.jsonl"), level="debug")
    assert isinstance(sink, LevelFilterSink)
    assert isinstance(sink.inner, JsonlLogSink)
    sink.close()
    with pytest.raises(ValueError):
        build_log_sink("jsonl")


def test_logging_listener_reports_outcomes() -> None:
    # Failures log at error level with the error; aborts carry their reason.
    sink = MemoryLogSink()
    listener = LoggingListener(sink)
    descriptor = step_descriptor(UniqueId.for_engine("stepwise"), 0, Step(description="Given", action=lambda: None))
    listener.execution_started(descriptor)
    listener.execution_finished(descriptor, ExecutionResult.failed(AssertionError("bad")))
    listener.execution_finished(descriptor, ExecutionResult.aborted("Previous step failed"))
    started, failed, aborted = sink.messages
    assert started.level == "debug"
    assert failed.level == "error"
    assert "bad" in str(failed.fields["error"])
    assert aborted.fields["reason"] == "Previous step failed"
    assert aborted.fields["id"] == "[engine:stepwise]/[step:1: Given]"
