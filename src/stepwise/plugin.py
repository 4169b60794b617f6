"""pytest host for stepwise scenarios.

Classes matched by pytest's ``python_classes`` pattern that declare
``@scenario`` methods are collected as a tree of one pytest item per step.
Steps are recorded once at collection time and replayed by the items.
"""

from __future__ import annotations

import inspect
from typing import Any

import pytest

from stepwise.engine.descriptor import Descriptor, UniqueId
from stepwise.engine.discovery import ScenarioDiscoverer
from stepwise.engine.scheduler import PREVIOUS_STEP_FAILED, run_step
from stepwise.kernel.scenario import has_scenarios
from stepwise.kernel.step import FailurePolicy

ENGINE_ID = "stepwise"


class _RunState:
    # Per-container propagation flag shared by sibling step items.
    def __init__(self) -> None:
        self.skip_remaining = False


@pytest.hookimpl(tryfirst=True)
def pytest_pycollect_makeitem(collector: pytest.Collector, name: str, obj: object) -> Any:
    if not isinstance(collector, pytest.Module):
        return None
    if not inspect.isclass(obj) or not collector.istestclass(obj, name):
        return None
    if not has_scenarios(obj):
        return None
    return ScenarioClass.from_parent(collector, name=name, scenario_class=obj)


class ScenarioClass(pytest.Collector):
    def __init__(self, *, scenario_class: type, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.scenario_class = scenario_class

    def collect(self) -> list[pytest.Collector]:
        discoverer = ScenarioDiscoverer()
        descriptor = discoverer.discover_class(self.scenario_class, UniqueId.for_engine(ENGINE_ID))
        return [
            ContainerNode.from_parent(self, name=child.unique_id.last[1], descriptor=child)
            for child in descriptor.children
        ]


class ContainerNode(pytest.Collector):
    # A scenario or an example; holds steps or example containers.
    def __init__(self, *, descriptor: Descriptor, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.descriptor = descriptor
        self.run_state = _RunState()

    def collect(self) -> list[pytest.Item | pytest.Collector]:
        if self.descriptor.discovery_error is not None:
            raise self.descriptor.discovery_error
        nodes: list[pytest.Item | pytest.Collector] = []
        for child in self.descriptor.children:
            if child.step is not None:
                nodes.append(StepItem.from_parent(self, name=child.unique_id.last[1], descriptor=child))
            else:
                nodes.append(ContainerNode.from_parent(self, name=child.display_name, descriptor=child))
        return nodes


class StepItem(pytest.Item):
    def __init__(self, *, descriptor: Descriptor, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.descriptor = descriptor

    @property
    def run_state(self) -> _RunState:
        assert isinstance(self.parent, ContainerNode)
        return self.parent.run_state

    def runtest(self) -> None:
        step = self.descriptor.step
        assert step is not None
        if step.is_skipped:
            pytest.skip(step.skip_reason or PREVIOUS_STEP_FAILED)
        if self.run_state.skip_remaining:
            pytest.skip(PREVIOUS_STEP_FAILED)
        outcome = run_step(step)
        if outcome.error is not None:
            if step.failure_policy is FailurePolicy.SKIP_REMAINING:
                self.run_state.skip_remaining = True
            if outcome.suppressed:
                self.add_report_section(
                    "call", "suppressed teardown errors", "\n".join(repr(error) for error in outcome.suppressed)
                )
            raise outcome.error

    def reportinfo(self) -> tuple[Any, int | None, str]:
        return self.path, None, f"step: {self.descriptor.display_name}"
