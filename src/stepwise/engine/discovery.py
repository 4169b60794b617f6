from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from stepwise.engine.descriptor import (
    CLASS_SEGMENT,
    EXAMPLE_SEGMENT,
    SCENARIO_SEGMENT,
    Descriptor,
    UniqueId,
    container,
    step_descriptor,
)
from stepwise.engine.scheduler import complete
from stepwise.errors import DiscoveryError, InstantiationError, ParameterCountError, ScenarioInvocationError
from stepwise.kernel.context import recording
from stepwise.kernel.registration import Steps
from stepwise.kernel.scenario import ParameterSet, ScenarioEntry, scenarios_of
from stepwise.kernel.step import Step
from stepwise.observability.domain.logging import LogMessage
from stepwise.observability.sinks import LogSink


def class_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def example_name(index: int, params: ParameterSet) -> str:
    return f"Example #{index + 1}: [{', '.join(str(value) for value in params.values)}]"


class ScenarioDiscoverer:
    # Records each scenario once per parameter set and materializes its descriptor subtree.
    def __init__(self, *, log_sink: LogSink | None = None) -> None:
        self._log_sink = log_sink

    def discover_class(
        self,
        cls: type,
        parent_id: UniqueId,
        *,
        only: set[str] | None = None,
    ) -> Descriptor:
        class_descriptor = container(parent_id.append(CLASS_SEGMENT, class_name(cls)), cls.__name__, source=cls)
        self.extend_class(class_descriptor, cls, only=only)
        return class_descriptor

    def extend_class(self, class_descriptor: Descriptor, cls: type, *, only: set[str] | None = None) -> None:
        # Adds scenarios not yet present; repeated selection of the same class never duplicates nodes.
        for entry in scenarios_of(cls):
            if only is not None and entry.name not in only:
                continue
            scenario_id = class_descriptor.unique_id.append(SCENARIO_SEGMENT, entry.name)
            if class_descriptor.find_child(scenario_id) is not None:
                continue
            class_descriptor.add_child(self.discover_scenario(cls, entry, scenario_id))

    def discover_scenario(self, cls: type, entry: ScenarioEntry, scenario_id: UniqueId) -> Descriptor:
        scenario_descriptor = container(scenario_id, entry.display_name, source=entry.function)
        if len(entry.examples) <= 1:
            params = entry.examples[0] if entry.examples else ParameterSet()
            self._discover_into(scenario_descriptor, cls, entry, params)
            return scenario_descriptor

        for index, params in enumerate(entry.examples):
            name = example_name(index, params)
            example_descriptor = container(scenario_id.append(EXAMPLE_SEGMENT, name), name, source=entry.function)
            scenario_descriptor.add_child(example_descriptor)
            self._discover_into(example_descriptor, cls, entry, params)
        return scenario_descriptor

    def record_steps(self, cls: type, entry: ScenarioEntry, params: ParameterSet) -> tuple[Step, ...]:
        # Exactly one invocation of the scenario function, inside its own recorder scope.
        with recording() as recorder:
            instance = instantiate(cls)
            bound = getattr(instance, entry.name)
            check_parameter_count(entry, bound, params)
            try:
                invoke(bound, Steps(recorder), params.values)
                # Freezing validates each draft (description, callable action).
                return recorder.freeze()
            except DiscoveryError:
                raise
            except Exception as exc:  # noqa: BLE001 - scoped to this scenario subtree
                raise ScenarioInvocationError(entry.display_name, exc) from exc

    def _discover_into(self, target: Descriptor, cls: type, entry: ScenarioEntry, params: ParameterSet) -> None:
        try:
            steps = self.record_steps(cls, entry, params)
        except DiscoveryError as exc:
            target.discovery_error = exc
            self._log("error", "scenario discovery failed", id=str(target.unique_id), error=str(exc))
            return
        for index, step in enumerate(steps):
            target.add_child(step_descriptor(target.unique_id, index, step))
        self._log("debug", "scenario discovered", id=str(target.unique_id), steps=len(steps))

    def _log(self, level: str, message: str, **fields: object) -> None:
        if self._log_sink is not None:
            self._log_sink.emit(LogMessage(level=level, message=message, fields=dict(fields)))


def instantiate(cls: type) -> object:
    # Only no-argument construction is supported.
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        signature = None
    if signature is not None:
        required = [
            name
            for name, param in signature.parameters.items()
            if param.default is inspect.Parameter.empty
            and param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        ]
        if required:
            raise InstantiationError(cls.__name__, f"missing: {', '.join(required)}")
    try:
        return cls()
    except Exception as exc:  # noqa: BLE001 - scoped to this scenario subtree
        raise DiscoveryError(f"{cls.__name__}() raised during discovery: {exc!r}", source=cls.__name__) from exc


def check_parameter_count(entry: ScenarioEntry, bound: Callable[..., Any], params: ParameterSet) -> None:
    # The first positional parameter receives the Steps facade; the rest take example values.
    positional = [
        param
        for param in inspect.signature(bound).parameters.values()
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    has_varargs = any(
        param.kind is inspect.Parameter.VAR_POSITIONAL for param in inspect.signature(bound).parameters.values()
    )
    if not positional and not has_varargs:
        raise ParameterCountError(entry.display_name, expected="no steps", actual=len(params.values))

    value_params = positional[1:]
    required = sum(1 for param in value_params if param.default is inspect.Parameter.empty)
    actual = len(params.values)
    if actual < required or (not has_varargs and actual > len(value_params)):
        expected = str(required) if required == len(value_params) else f"{required}-{len(value_params)}"
        raise ParameterCountError(entry.display_name, expected=expected, actual=actual)


def invoke(bound: Callable[..., Any], steps: Steps, values: tuple[object, ...]) -> None:
    # Coroutine scenarios still only record; they are run to completion before harvesting.
    complete(bound(steps, *values))
