from __future__ import annotations

import pytest

from stepwise.engine.descriptor import DescriptorKind, UniqueId, container, step_descriptor
from stepwise.kernel.step import Step


def test_unique_id_renders_segments() -> None:
    # Ids render as [type:value] segments joined by "/".
    uid = UniqueId.for_engine("stepwise").append("class", "pkg.Cls").append("scenario", "addition")
    assert str(uid) == "[engine:stepwise]/[class:pkg.Cls]/[scenario:addition]"
    assert uid.last == ("scenario", "addition")


def test_unique_id_rejects_empty_segments() -> None:
    with pytest.raises(ValueError):
        UniqueId.for_engine("stepwise").append("step", "")


def test_step_descriptor_id_includes_position() -> None:
    # Same description at different positions still yields distinct ids.
    parent = UniqueId.for_engine("stepwise").append("scenario", "s")
    step = Step(description="Then it works", action=lambda: None)
    first = step_descriptor(parent, 0, step)
    second = step_descriptor(parent, 1, step)
    assert first.unique_id.last == ("step", "1: Then it works")
    assert second.unique_id.last == ("step", "2: Then it works")
    assert first.display_name == "Then it works"
    assert first.kind is DescriptorKind.TEST


def test_tests_cannot_have_children() -> None:
    parent = UniqueId.for_engine("stepwise")
    leaf = step_descriptor(parent, 0, Step(description="Given", action=lambda: None))
    with pytest.raises(ValueError):
        leaf.add_child(container(parent.append("scenario", "x"), "x"))


def test_walk_and_reset_run_state() -> None:
    # Walk is pre-order; reset clears per-run skip flags everywhere.
    root = container(UniqueId.for_engine("stepwise"), "Stepwise")
    scenario = root.add_child(container(root.unique_id.append("scenario", "s"), "s"))
    leaf = scenario.add_child(step_descriptor(scenario.unique_id, 0, Step(description="Given", action=lambda: None)))
    leaf.should_skip = True
    leaf.run_skip_reason = "Previous step failed"
    assert [node.display_name for node in root.walk()] == ["Stepwise", "s", "Given"]
    assert leaf.parent is scenario
    assert scenario.step_children() == [leaf]
    root.reset_run_state()
    assert not leaf.should_skip
    assert leaf.run_skip_reason is None
