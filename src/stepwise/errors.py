from __future__ import annotations


class StepwiseError(RuntimeError):
    # Base class for engine bookkeeping errors; step failures are outcomes, not StepwiseErrors.
    pass


class RecorderClosedError(StepwiseError):
    # Raised when a handle or builder is used after its scenario invocation finished.
    pass


class SelectorError(StepwiseError, ValueError):
    # Raised for malformed discovery selectors.
    pass


class DiscoveryError(StepwiseError):
    # Scoped to one scenario/example subtree; reported as that container's failure.
    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class InstantiationError(DiscoveryError):
    def __init__(self, type_name: str, detail: str) -> None:
        super().__init__(
            f"{type_name} requires constructor parameters ({detail}). "
            "Scenario-owning types need a no-argument constructor; "
            "dependency-injected test classes are not supported by stepwise.",
            source=type_name,
        )
        self.type_name = type_name


class ParameterCountError(DiscoveryError):
    def __init__(self, scenario: str, *, expected: str, actual: int) -> None:
        super().__init__(
            f"Scenario '{scenario}' declares {expected} parameter(s) but the example supplies {actual}",
            source=scenario,
        )
        self.expected = expected
        self.actual = actual


class ScenarioInvocationError(DiscoveryError):
    # The scenario function raised while recording its steps.
    def __init__(self, scenario: str, cause: Exception) -> None:
        super().__init__(f"Scenario '{scenario}' raised during discovery: {cause!r}", source=scenario)
        self.cause = cause
