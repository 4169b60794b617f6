from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

# Deferred step bodies may return an awaitable; the scheduler joins it before moving on.
StepAction = Callable[[], object]


class FailurePolicy(Enum):
    # Governs what happens to later steps once this step fails.
    SKIP_REMAINING = "skip_remaining"
    CONTINUE = "continue"


DEFAULT_SKIP_REASON = "Step skipped"


@dataclass(frozen=True, slots=True)
class Step:
    # Immutable record replayed by the scheduler; produced by freezing a StepDraft.
    description: str
    action: StepAction
    skip_reason: str | None = None
    teardown_actions: tuple[StepAction, ...] = ()
    failure_policy: FailurePolicy = FailurePolicy.SKIP_REMAINING

    def __post_init__(self) -> None:
        if not isinstance(self.description, str) or not self.description:
            raise ValueError("Step.description must be a non-empty string")
        if not callable(self.action):
            raise TypeError("Step.action must be callable")

    @property
    def is_skipped(self) -> bool:
        return self.skip_reason is not None


@dataclass(slots=True)
class StepDraft:
    # Mutable form owned by the recorder and its handles until the scenario function returns.
    description: str
    action: StepAction
    skip_reason: str | None = None
    teardown_actions: list[StepAction] = field(default_factory=list)
    failure_policy: FailurePolicy = FailurePolicy.SKIP_REMAINING

    def freeze(self) -> Step:
        return Step(
            description=self.description,
            action=self.action,
            skip_reason=self.skip_reason,
            teardown_actions=tuple(self.teardown_actions),
            failure_policy=self.failure_policy,
        )
