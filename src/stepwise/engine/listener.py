from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from stepwise.engine.descriptor import Descriptor, DescriptorKind
from stepwise.observability.domain.logging import LogMessage
from stepwise.observability.sinks import LogSink


class ResultStatus(Enum):
    SUCCESSFUL = "successful"
    FAILED = "failed"
    ABORTED = "aborted"


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    # Outcome reported once per node.
    status: ResultStatus
    error: BaseException | None = None
    reason: str | None = None
    # Teardown errors raised after the reported error.
    suppressed: tuple[BaseException, ...] = ()

    @classmethod
    def successful(cls) -> ExecutionResult:
        return cls(status=ResultStatus.SUCCESSFUL)

    @classmethod
    def failed(cls, error: BaseException, *, suppressed: tuple[BaseException, ...] = ()) -> ExecutionResult:
        return cls(status=ResultStatus.FAILED, error=error, suppressed=tuple(suppressed))

    @classmethod
    def aborted(cls, reason: str) -> ExecutionResult:
        return cls(status=ResultStatus.ABORTED, reason=reason)


@runtime_checkable
class ExecutionListener(Protocol):
    def execution_started(self, descriptor: Descriptor) -> None:
        """Called before a node runs."""
        raise NotImplementedError("ExecutionListener is a port; use a concrete listener.")

    def execution_finished(self, descriptor: Descriptor, result: ExecutionResult) -> None:
        """Called exactly once per started node."""
        raise NotImplementedError("ExecutionListener is a port; use a concrete listener.")


@dataclass(frozen=True, slots=True)
class ExecutionEvent:
    kind: str  # "started" | "finished"
    descriptor: Descriptor
    result: ExecutionResult | None = None


@dataclass(frozen=True, slots=True)
class EventStats:
    started: int = 0
    succeeded: int = 0
    failed: int = 0
    aborted: int = 0


@dataclass
class RecordingListener:
    # In-memory event log with per-kind statistics.
    events: list[ExecutionEvent] = field(default_factory=list)

    def execution_started(self, descriptor: Descriptor) -> None:
        self.events.append(ExecutionEvent(kind="started", descriptor=descriptor))

    def execution_finished(self, descriptor: Descriptor, result: ExecutionResult) -> None:
        self.events.append(ExecutionEvent(kind="finished", descriptor=descriptor, result=result))

    def finished(self, *, kind: DescriptorKind = DescriptorKind.TEST) -> list[ExecutionEvent]:
        return [e for e in self.events if e.kind == "finished" and e.descriptor.kind is kind]

    def result_of(self, display_name: str) -> ExecutionResult:
        for event in self.events:
            if event.kind == "finished" and event.descriptor.display_name == display_name and event.result is not None:
                return event.result
        raise KeyError(display_name)

    def stats(self, *, kind: DescriptorKind = DescriptorKind.TEST) -> EventStats:
        started = sum(1 for e in self.events if e.kind == "started" and e.descriptor.kind is kind)
        finished = self.finished(kind=kind)
        return EventStats(
            started=started,
            succeeded=sum(1 for e in finished if e.result and e.result.status is ResultStatus.SUCCESSFUL),
            failed=sum(1 for e in finished if e.result and e.result.status is ResultStatus.FAILED),
            aborted=sum(1 for e in finished if e.result and e.result.status is ResultStatus.ABORTED),
        )


class LoggingListener:
    # Emits one structured log message per event.
    def __init__(self, sink: LogSink) -> None:
        self._sink = sink

    def execution_started(self, descriptor: Descriptor) -> None:
        self._sink.emit(
            LogMessage(
                level="debug",
                message="execution started",
                fields={"id": str(descriptor.unique_id), "name": descriptor.display_name},
            )
        )

    def execution_finished(self, descriptor: Descriptor, result: ExecutionResult) -> None:
        fields: dict[str, object] = {
            "id": str(descriptor.unique_id),
            "name": descriptor.display_name,
            "kind": descriptor.kind.value,
            "status": result.status.value,
        }
        level = "info"
        if result.status is ResultStatus.FAILED:
            level = "error"
            fields["error"] = repr(result.error)
            if result.suppressed:
                fields["suppressed"] = [repr(error) for error in result.suppressed]
        elif result.status is ResultStatus.ABORTED:
            fields["reason"] = result.reason
        self._sink.emit(LogMessage(level=level, message="execution finished", fields=fields))


class CompositeListener:
    # Fans events out to several listeners in order.
    def __init__(self, *listeners: ExecutionListener) -> None:
        self._listeners = listeners

    def execution_started(self, descriptor: Descriptor) -> None:
        for listener in self._listeners:
            listener.execution_started(descriptor)

    def execution_finished(self, descriptor: Descriptor, result: ExecutionResult) -> None:
        for listener in self._listeners:
            listener.execution_finished(descriptor, result)
