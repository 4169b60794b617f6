from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from stepwise.errors import RecorderClosedError
from stepwise.kernel.step import Step, StepDraft


class StepRecorder:
    # Buffer of steps recorded during exactly one scenario-function invocation.
    # A recorder is handed to the invocation by reference; it is never shared or ambient.
    def __init__(self) -> None:
        self._steps: list[StepDraft] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def steps(self) -> list[StepDraft]:
        # Live, ordered view; callers must not hold it past the invocation.
        return self._steps

    def add_step(self, step: StepDraft) -> int:
        self._ensure_open()
        self._steps.append(step)
        return len(self._steps) - 1

    def replace_step(self, index: int, step: StepDraft) -> None:
        self._ensure_open()
        if not 0 <= index < len(self._steps):
            raise IndexError(f"No recorded step at index {index}")
        self._steps[index] = step

    def replace_last_step(self, step: StepDraft) -> None:
        if not self._steps:
            raise IndexError("No recorded step to replace")
        self.replace_step(len(self._steps) - 1, step)

    def freeze(self) -> tuple[Step, ...]:
        # Materialize immutable records in registration order.
        return tuple(draft.freeze() for draft in self._steps)

    def clear(self) -> None:
        self._steps.clear()

    def close(self) -> None:
        self.clear()
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise RecorderClosedError("Steps cannot be changed after the scenario function has returned")


@contextmanager
def recording() -> Iterator[StepRecorder]:
    # Scope brackets one invocation; released on success and on error alike.
    recorder = StepRecorder()
    try:
        yield recorder
    finally:
        recorder.close()
