"""Registration surface handed to scenario functions.

A scenario function receives a :class:`Steps` object bound to the recorder of
its own invocation and uses it to describe the narrative::

    @scenario
    def addition(self, steps):
        state = {}
        steps.given("Given a calculator", lambda: state.update(calc=Calculator()))

        @steps.when("When I add 2 and 3")
        def _():
            state["result"] = state["calc"].add(2, 3)

        steps.then("Then a result is stored", lambda: state["result"])

Nothing runs here: every call only records a step for later replay.
"""

from __future__ import annotations

import dataclasses
from typing import overload

from stepwise.errors import RecorderClosedError
from stepwise.kernel.context import StepRecorder
from stepwise.kernel.step import DEFAULT_SKIP_REASON, FailurePolicy, StepAction, StepDraft


class StepHandle:
    """Post-hoc modifiers for a step that has just been registered."""

    def __init__(self, recorder: StepRecorder, index: int) -> None:
        self._recorder = recorder
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    @property
    def draft(self) -> StepDraft:
        self._ensure_open()
        return self._recorder.steps[self._index]

    def teardown(self, action: StepAction) -> StepHandle:
        """Attach a cleanup that runs after the step body, even when it fails.

        Returns the same handle, so calls chain; cleanups run in attachment order.
        """
        self.draft.teardown_actions.append(action)
        return self

    def on_failure(self, policy: FailurePolicy) -> StepHandle:
        """Set what happens to later steps if this one fails."""
        if not isinstance(policy, FailurePolicy):
            raise TypeError("on_failure expects a FailurePolicy")
        updated = dataclasses.replace(self.draft, failure_policy=policy)
        self._recorder.replace_step(self._index, updated)
        return StepHandle(self._recorder, self._index)

    def _ensure_open(self) -> None:
        if self._recorder.closed:
            raise RecorderClosedError("Step handles are only valid while the scenario function runs")


class StepBuilder:
    """Pre-declares skip/teardown/failure policy before the step body is known.

    The builder is terminal once an action is supplied, either through
    :meth:`run` or by calling it (which also makes it usable as a decorator).
    """

    def __init__(self, recorder: StepRecorder, description: str) -> None:
        self._recorder = recorder
        self._description = description
        self._skip_reason: str | None = None
        self._teardown_actions: list[StepAction] = []
        self._failure_policy = FailurePolicy.SKIP_REMAINING
        self._registered = False

    def skip(self, reason: str = DEFAULT_SKIP_REASON) -> StepBuilder:
        self._skip_reason = reason
        return self

    def teardown(self, action: StepAction) -> StepBuilder:
        self._teardown_actions.append(action)
        return self

    def on_failure(self, policy: FailurePolicy) -> StepBuilder:
        if not isinstance(policy, FailurePolicy):
            raise TypeError("on_failure expects a FailurePolicy")
        self._failure_policy = policy
        return self

    def run(self, action: StepAction) -> StepHandle:
        if self._registered:
            raise RuntimeError(f"Step '{self._description}' already has an action")
        if self._recorder.closed:
            raise RecorderClosedError("Steps can only be registered while the scenario function runs")
        draft = StepDraft(
            description=self._description,
            action=action,
            skip_reason=self._skip_reason,
            teardown_actions=list(self._teardown_actions),
            failure_policy=self._failure_policy,
        )
        index = self._recorder.add_step(draft)
        self._registered = True
        return StepHandle(self._recorder, index)

    def __call__(self, action: StepAction) -> StepHandle:
        return self.run(action)


class Steps:
    """Facade over one invocation's recorder."""

    def __init__(self, recorder: StepRecorder) -> None:
        self._recorder = recorder

    @property
    def recorder(self) -> StepRecorder:
        return self._recorder

    @overload
    def register(self, description: str) -> StepBuilder: ...

    @overload
    def register(self, description: str, action: StepAction) -> StepHandle: ...

    def register(self, description: str, action: StepAction | None = None) -> StepHandle | StepBuilder:
        """Record a step; without an action, return a builder usable as a decorator."""
        builder = StepBuilder(self._recorder, description)
        if action is None:
            return builder
        return builder.run(action)

    def step(self, description: str) -> StepBuilder:
        return StepBuilder(self._recorder, description)

    def __call__(self, description: str, action: StepAction | None = None) -> StepHandle | StepBuilder:
        return self.register(description, action)

    # BDD aliases; descriptions are used verbatim.
    def given(self, description: str, action: StepAction | None = None) -> StepHandle | StepBuilder:
        return self.register(description, action)

    def when(self, description: str, action: StepAction | None = None) -> StepHandle | StepBuilder:
        return self.register(description, action)

    def then(self, description: str, action: StepAction | None = None) -> StepHandle | StepBuilder:
        return self.register(description, action)

    def and_(self, description: str, action: StepAction | None = None) -> StepHandle | StepBuilder:
        return self.register(description, action)

    def but(self, description: str, action: StepAction | None = None) -> StepHandle | StepBuilder:
        return self.register(description, action)
