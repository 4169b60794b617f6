from __future__ import annotations

import pytest

from stepwise.engine.descriptor import Descriptor, UniqueId, container, step_descriptor
from stepwise.engine.listener import RecordingListener, ResultStatus
from stepwise.engine.scheduler import PREVIOUS_STEP_FAILED, StepScheduler, run_step
from stepwise.kernel.step import FailurePolicy, Step, StepAction


def _fail() -> None:
    raise AssertionError("step failed")


def _descriptors(*steps: Step) -> list[Descriptor]:
    parent = UniqueId.for_engine("test").append("scenario", "s")
    return [step_descriptor(parent, index, step) for index, step in enumerate(steps)]


def _step(description: str, action: StepAction = lambda: None, **kwargs: object) -> Step:
    return Step(description=description, action=action, **kwargs)  # type: ignore[arg-type]


def test_failure_skips_remaining_steps() -> None:
    # Default policy: a failure aborts every later step with the propagated reason.
    listener = RecordingListener()
    failed = StepScheduler().execute(
        _descriptors(_step("Given"), _step("When", _fail), _step("Then"), _step("And")),
        listener,
    )
    assert failed
    assert listener.result_of("Given").status is ResultStatus.SUCCESSFUL
    assert listener.result_of("When").status is ResultStatus.FAILED
    assert listener.result_of("Then").status is ResultStatus.ABORTED
    assert listener.result_of("Then").reason == PREVIOUS_STEP_FAILED
    assert listener.result_of("And").reason == "Previous step failed"


def test_continue_policy_keeps_running() -> None:
    # CONTINUE failures do not propagate.
    listener = RecordingListener()
    StepScheduler().execute(
        _descriptors(_step("Given", _fail, failure_policy=FailurePolicy.CONTINUE), _step("Then")),
        listener,
    )
    assert listener.result_of("Given").status is ResultStatus.FAILED
    assert listener.result_of("Then").status is ResultStatus.SUCCESSFUL


def test_explicit_skip_reason_wins_after_failure() -> None:
    # An author-supplied skip reason is reported even when propagation is active.
    calls: list[str] = []
    listener = RecordingListener()
    StepScheduler().execute(
        _descriptors(_step("Given", _fail), _step("When", lambda: calls.append("x"), skip_reason="Not ready")),
        listener,
    )
    assert listener.result_of("When").reason == "Not ready"
    assert calls == []


def test_skipped_step_does_not_run_teardowns() -> None:
    calls: list[str] = []
    listener = RecordingListener()
    StepScheduler().execute(
        _descriptors(_step("Given", skip_reason="Later", teardown_actions=(lambda: calls.append("teardown"),))),
        listener,
    )
    assert calls == []
    assert listener.stats().aborted == 1


def test_every_step_is_started_and_finished_once() -> None:
    # Started/finished pairs are reported for skipped steps too.
    listener = RecordingListener()
    StepScheduler().execute(_descriptors(_step("Given", _fail), _step("Then")), listener)
    kinds = [(event.kind, event.descriptor.display_name) for event in listener.events]
    assert kinds == [("started", "Given"), ("finished", "Given"), ("started", "Then"), ("finished", "Then")]


def test_run_step_runs_teardowns_after_action_in_order() -> None:
    log: list[str] = []
    outcome = run_step(
        _step(
            "Given",
            lambda: log.append("action"),
            teardown_actions=(lambda: log.append("first"), lambda: log.append("second")),
        )
    )
    assert not outcome.failed
    assert log == ["action", "first", "second"]


def test_run_step_runs_teardowns_after_failure() -> None:
    # Teardowns still run; the action's error is the reported one.
    log: list[str] = []
    outcome = run_step(_step("Given", _fail, teardown_actions=(lambda: log.append("teardown"),)))
    assert isinstance(outcome.error, AssertionError)
    assert log == ["teardown"]


def test_teardown_error_is_suppressed_behind_action_error() -> None:
    # Secondary errors never mask the primary one; they are kept on the outcome.
    def _bad_teardown() -> None:
        raise RuntimeError("cleanup broke")

    log: list[str] = []
    outcome = run_step(_step("Given", _fail, teardown_actions=(_bad_teardown, lambda: log.append("after"))))
    assert isinstance(outcome.error, AssertionError)
    assert len(outcome.suppressed) == 1
    assert isinstance(outcome.suppressed[0], RuntimeError)
    assert log == ["after"]


SHARED_ERROR = AssertionError("cached failure")


def _raise_shared() -> None:
    raise SHARED_ERROR


def test_replay_leaves_action_error_unchanged() -> None:
    # Replaying a step never mutates the error object raised by its action.
    def _bad_teardown() -> None:
        raise RuntimeError("cleanup broke")

    step = _step("Given", _raise_shared, teardown_actions=(_bad_teardown,))
    first = run_step(step)
    second = run_step(step)
    assert first.error is SHARED_ERROR
    assert second.error is SHARED_ERROR
    assert getattr(SHARED_ERROR, "__notes__", []) == []
    assert len(second.suppressed) == 1


def test_failed_result_carries_suppressed_errors() -> None:
    def _bad_teardown() -> None:
        raise RuntimeError("cleanup broke")

    listener = RecordingListener()
    StepScheduler().execute(_descriptors(_step("Given", _fail, teardown_actions=(_bad_teardown,))), listener)
    result = listener.result_of("Given")
    assert isinstance(result.error, AssertionError)
    assert [str(error) for error in result.suppressed] == ["cleanup broke"]


def test_teardown_error_alone_fails_the_step() -> None:
    def _bad_teardown() -> None:
        raise RuntimeError("cleanup broke")

    outcome = run_step(_step("Given", teardown_actions=(_bad_teardown,)))
    assert isinstance(outcome.error, RuntimeError)
    assert outcome.suppressed == ()


def test_async_actions_are_joined() -> None:
    # Awaitable results are completed before the step is reported.
    log: list[str] = []

    async def _act() -> None:
        log.append("async")

    outcome = run_step(_step("When", _act))
    assert not outcome.failed
    assert log == ["async"]


def test_missing_step_is_rejected() -> None:
    node = container(UniqueId.for_engine("test").append("scenario", "s"), "s")
    with pytest.raises(ValueError):
        StepScheduler().execute([node], RecordingListener())


def test_result_of_unknown_node() -> None:
    # Nodes that never finished have no result.
    listener = RecordingListener()
    descriptor = _descriptors(_step("Given"))[0]
    listener.execution_started(descriptor)
    with pytest.raises(KeyError):
        listener.result_of("Given")
