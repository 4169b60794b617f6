"""stepwise: narrative scenarios reported one step at a time.

Scenario functions are recorded once during discovery and their captured
steps are replayed during execution::

    from stepwise import scenario, example

    class AdditionScenarios:
        @scenario
        @example(ints=[1, 2, 3])
        @example(ints=[4, 5, 9])
        def addition(self, steps, a, b, expected):
            result = {}
            steps.when(f"When I add {a} and {b}", lambda: result.update(sum=a + b))

            @steps.then(f"Then the result is {expected}")
            def _check():
                assert result["sum"] == expected
"""

from .errors import (
    DiscoveryError,
    InstantiationError,
    ParameterCountError,
    RecorderClosedError,
    ScenarioInvocationError,
    SelectorError,
    StepwiseError,
)
from .kernel import FailurePolicy, ParameterSet, Step, StepBuilder, StepHandle, Steps, example, scenario

__all__ = [
    "DiscoveryError",
    "FailurePolicy",
    "InstantiationError",
    "ParameterCountError",
    "ParameterSet",
    "RecorderClosedError",
    "ScenarioInvocationError",
    "SelectorError",
    "Step",
    "StepBuilder",
    "StepHandle",
    "Steps",
    "StepwiseError",
    "example",
    "scenario",
]
