from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from stepwise.errors import DiscoveryError
from stepwise.kernel.step import Step

ENGINE_SEGMENT = "engine"
CLASS_SEGMENT = "class"
SCENARIO_SEGMENT = "scenario"
EXAMPLE_SEGMENT = "example"
STEP_SEGMENT = "step"


@dataclass(frozen=True, slots=True)
class UniqueId:
    # Ordered (type, value) segments; rendered as [type:value]/[type:value]/...
    segments: tuple[tuple[str, str], ...]

    @classmethod
    def for_engine(cls, engine_id: str) -> UniqueId:
        return cls(segments=((ENGINE_SEGMENT, engine_id),))

    def append(self, segment_type: str, value: str) -> UniqueId:
        if not segment_type or not value:
            raise ValueError("UniqueId segments need a non-empty type and value")
        return UniqueId(segments=(*self.segments, (segment_type, value)))

    @property
    def last(self) -> tuple[str, str]:
        return self.segments[-1]

    def __str__(self) -> str:
        return "/".join(f"[{kind}:{value}]" for kind, value in self.segments)


class DescriptorKind(Enum):
    CONTAINER = "container"
    TEST = "test"


@dataclass(slots=True, eq=False)
class Descriptor:
    # Node of the static test tree. Only should_skip/run_skip_reason change after discovery.
    unique_id: UniqueId
    display_name: str
    kind: DescriptorKind
    children: list[Descriptor] = field(default_factory=list)
    step: Step | None = None
    source: object | None = None
    discovery_error: DiscoveryError | None = None
    parent: Descriptor | None = field(default=None, repr=False)
    should_skip: bool = False
    run_skip_reason: str | None = None

    @property
    def is_container(self) -> bool:
        return self.kind is DescriptorKind.CONTAINER

    @property
    def is_test(self) -> bool:
        return self.kind is DescriptorKind.TEST

    @property
    def segment_type(self) -> str:
        return self.unique_id.last[0]

    def add_child(self, child: Descriptor) -> Descriptor:
        if self.kind is DescriptorKind.TEST:
            raise ValueError("Test descriptors cannot have children")
        child.parent = self
        self.children.append(child)
        return child

    def find_child(self, unique_id: UniqueId) -> Descriptor | None:
        for child in self.children:
            if child.unique_id == unique_id:
                return child
        return None

    def step_children(self) -> list[Descriptor]:
        return [child for child in self.children if child.step is not None]

    def walk(self) -> Iterator[Descriptor]:
        # Depth-first, pre-order.
        yield self
        for child in self.children:
            yield from child.walk()

    def reset_run_state(self) -> None:
        for node in self.walk():
            node.should_skip = False
            node.run_skip_reason = None


def container(unique_id: UniqueId, display_name: str, *, source: object | None = None) -> Descriptor:
    return Descriptor(unique_id=unique_id, display_name=display_name, kind=DescriptorKind.CONTAINER, source=source)


def step_descriptor(parent_id: UniqueId, index: int, step: Step) -> Descriptor:
    # Keyed by position and wording so duplicate descriptions still get distinct ids.
    return Descriptor(
        unique_id=parent_id.append(STEP_SEGMENT, f"{index + 1}: {step.description}"),
        display_name=step.description,
        kind=DescriptorKind.TEST,
        step=step,
    )
