from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar, overload

F = TypeVar("F", bound=Callable[..., Any])

_SCENARIO_ATTR = "__scenario_meta__"
_EXAMPLES_ATTR = "__scenario_examples__"


@dataclass(frozen=True, slots=True)
class ParameterSet:
    # Typed scalars bound positionally: ints, longs, texts, booleans, doubles (fixed order).
    ints: tuple[int, ...] = ()
    longs: tuple[int, ...] = ()
    texts: tuple[str, ...] = ()
    booleans: tuple[bool, ...] = ()
    doubles: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        # Strict kinds: no coercion, and bool never passes as an integer.
        _check_kind("ints", self.ints, lambda v: isinstance(v, int) and not isinstance(v, bool))
        _check_kind("longs", self.longs, lambda v: isinstance(v, int) and not isinstance(v, bool))
        _check_kind("texts", self.texts, lambda v: isinstance(v, str))
        _check_kind("booleans", self.booleans, lambda v: isinstance(v, bool))
        _check_kind("doubles", self.doubles, lambda v: isinstance(v, float))

    @property
    def values(self) -> tuple[object, ...]:
        return (*self.ints, *self.longs, *self.texts, *self.booleans, *self.doubles)


def _check_kind(name: str, values: object, accept: Callable[[object], bool]) -> None:
    if not isinstance(values, tuple):
        raise TypeError(f"ParameterSet.{name} must be a tuple")
    for value in values:
        if not accept(value):
            raise TypeError(f"ParameterSet.{name} has a value of the wrong kind: {value!r}")


@dataclass(frozen=True, slots=True)
class ScenarioMeta:
    # Marker attached by @scenario.
    display_name: str = ""


@dataclass(frozen=True, slots=True)
class ScenarioEntry:
    # One manifest row: scenario function plus its declared parameter sets.
    name: str
    function: Callable[..., Any]
    display_name: str
    examples: tuple[ParameterSet, ...] = field(default_factory=tuple)

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.function)


@overload
def scenario(fn: F) -> F: ...


@overload
def scenario(*, display_name: str = "") -> Callable[[F], F]: ...


def scenario(fn: Callable[..., Any] | None = None, *, display_name: str = "") -> Any:
    # Marks a method as a scenario; usable bare or with a display name.
    meta = ScenarioMeta(display_name=display_name)

    def _decorate(target: F) -> F:
        setattr(target, _SCENARIO_ATTR, meta)
        return target

    if fn is not None:
        return _decorate(fn)
    return _decorate


def example(
    *,
    ints: Iterable[int] = (),
    longs: Iterable[int] = (),
    texts: Iterable[str] = (),
    booleans: Iterable[bool] = (),
    doubles: Iterable[float] = (),
) -> Callable[[F], F]:
    # Repeatable; parameter sets keep source order whatever side of @scenario they sit on.
    params = ParameterSet(
        ints=tuple(ints),
        longs=tuple(longs),
        texts=tuple(texts),
        booleans=tuple(booleans),
        doubles=tuple(doubles),
    )

    def _decorate(target: F) -> F:
        existing: tuple[ParameterSet, ...] = getattr(target, _EXAMPLES_ATTR, ())
        # Decorators apply bottom-up, so prepend to preserve top-down reading order.
        setattr(target, _EXAMPLES_ATTR, (params, *existing))
        return target

    return _decorate


def get_scenario_meta(target: object) -> ScenarioMeta | None:
    meta = getattr(target, _SCENARIO_ATTR, None)
    if isinstance(meta, ScenarioMeta):
        return meta
    return None


def scenarios_of(cls: type) -> list[ScenarioEntry]:
    # Static manifest for a scenario-owning class: definition order, bases first, overrides in place.
    found: dict[str, ScenarioEntry] = {}
    for klass in reversed(inspect.getmro(cls)):
        for attr_name, value in vars(klass).items():
            function = value.__func__ if isinstance(value, (staticmethod, classmethod)) else value
            meta = get_scenario_meta(function)
            if meta is None:
                if attr_name in found:
                    # Overridden by a plain method: no longer a scenario.
                    del found[attr_name]
                continue
            found[attr_name] = ScenarioEntry(
                name=attr_name,
                function=function,
                display_name=meta.display_name or attr_name,
                examples=tuple(getattr(function, _EXAMPLES_ATTR, ())),
            )
    return list(found.values())


def has_scenarios(cls: object) -> bool:
    return inspect.isclass(cls) and bool(scenarios_of(cls))
