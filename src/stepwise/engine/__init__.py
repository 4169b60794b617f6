from .descriptor import Descriptor, DescriptorKind, UniqueId
from .discovery import ScenarioDiscoverer
from .host import StepwiseEngine
from .listener import (
    CompositeListener,
    EventStats,
    ExecutionEvent,
    ExecutionListener,
    ExecutionResult,
    LoggingListener,
    RecordingListener,
    ResultStatus,
)
from .scanner import Scanner
from .scheduler import PREVIOUS_STEP_FAILED, StepOutcome, StepScheduler, run_step
from .selectors import ClassSelector, MethodSelector, PackageSelector, PathSelector, Selector

__all__ = [
    "PREVIOUS_STEP_FAILED",
    "ClassSelector",
    "CompositeListener",
    "Descriptor",
    "DescriptorKind",
    "EventStats",
    "ExecutionEvent",
    "ExecutionListener",
    "ExecutionResult",
    "LoggingListener",
    "MethodSelector",
    "PackageSelector",
    "PathSelector",
    "RecordingListener",
    "ResultStatus",
    "Scanner",
    "ScenarioDiscoverer",
    "Selector",
    "StepOutcome",
    "StepScheduler",
    "StepwiseEngine",
    "UniqueId",
    "run_step",
]
