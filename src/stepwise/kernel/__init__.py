from .context import StepRecorder, recording
from .registration import StepBuilder, StepHandle, Steps
from .scenario import ParameterSet, ScenarioEntry, ScenarioMeta, example, has_scenarios, scenario, scenarios_of
from .step import DEFAULT_SKIP_REASON, FailurePolicy, Step, StepAction, StepDraft

# Kernel exports cover recording and the scenario manifest; execution lives in stepwise.engine.
__all__ = [
    "DEFAULT_SKIP_REASON",
    "FailurePolicy",
    "ParameterSet",
    "ScenarioEntry",
    "ScenarioMeta",
    "Step",
    "StepAction",
    "StepBuilder",
    "StepDraft",
    "StepHandle",
    "StepRecorder",
    "Steps",
    "example",
    "has_scenarios",
    "recording",
    "scenario",
    "scenarios_of",
]
