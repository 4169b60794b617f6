from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass

from stepwise.engine.descriptor import Descriptor
from stepwise.engine.listener import ExecutionListener, ExecutionResult
from stepwise.kernel.step import FailurePolicy, Step, StepAction

PREVIOUS_STEP_FAILED = "Previous step failed"


@dataclass(frozen=True, slots=True)
class StepOutcome:
    # Result of one attempted step: primary error plus teardown errors suppressed behind it.
    error: Exception | None = None
    suppressed: tuple[Exception, ...] = ()

    @property
    def failed(self) -> bool:
        return self.error is not None


def join(action: StepAction) -> None:
    complete(action())


def complete(result: object) -> None:
    # Synchronous-completion contract: awaitables are driven to completion before returning.
    if inspect.isawaitable(result):
        asyncio.run(_await(result))


async def _await(awaitable: Awaitable[object]) -> None:
    await awaitable


def run_step(step: Step) -> StepOutcome:
    # Runs the captured action, then every teardown in order, exactly once each.
    error: Exception | None = None
    suppressed: list[Exception] = []
    try:
        join(step.action)
    except Exception as exc:  # noqa: BLE001 - converted to a reported outcome
        error = exc
    finally:
        for teardown in step.teardown_actions:
            try:
                join(teardown)
            except Exception as exc:  # noqa: BLE001 - later errors are kept beside the first one
                if error is None:
                    error = exc
                else:
                    suppressed.append(exc)
    return StepOutcome(error=error, suppressed=tuple(suppressed))


class StepScheduler:
    # Replays step descriptors in registration order with skip propagation.
    def execute(self, steps: Sequence[Descriptor], listener: ExecutionListener) -> bool:
        # Returns True when any step failed.
        skip_remaining = False
        any_failed = False
        for descriptor in steps:
            step = descriptor.step
            if step is None:
                raise ValueError(f"Descriptor {descriptor.unique_id} has no captured step")

            if skip_remaining and not step.is_skipped:
                descriptor.should_skip = True
                descriptor.run_skip_reason = PREVIOUS_STEP_FAILED

            listener.execution_started(descriptor)
            if step.is_skipped or descriptor.should_skip:
                # Explicit author-supplied reasons win over propagated ones.
                reason = step.skip_reason or descriptor.run_skip_reason or PREVIOUS_STEP_FAILED
                listener.execution_finished(descriptor, ExecutionResult.aborted(reason))
                continue

            outcome = run_step(step)
            if outcome.error is not None:
                any_failed = True
                listener.execution_finished(
                    descriptor, ExecutionResult.failed(outcome.error, suppressed=outcome.suppressed)
                )
                if step.failure_policy is FailurePolicy.SKIP_REMAINING:
                    skip_remaining = True
            else:
                listener.execution_finished(descriptor, ExecutionResult.successful())
        return any_failed
