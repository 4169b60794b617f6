from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from stepwise.errors import SelectorError


@dataclass(frozen=True, slots=True)
class ClassSelector:
    # A class object, or its dotted "module.Class" name.
    target: type | str

    @property
    def name(self) -> str:
        if isinstance(self.target, str):
            return self.target
        return f"{self.target.__module__}.{self.target.__qualname__}"


@dataclass(frozen=True, slots=True)
class MethodSelector:
    # One scenario of a class: "module.Class#method".
    class_target: type | str
    method_name: str

    def __post_init__(self) -> None:
        if not self.method_name:
            raise SelectorError("MethodSelector.method_name must be a non-empty string")

    @classmethod
    def parse(cls, text: str) -> MethodSelector:
        class_name, sep, method_name = text.partition("#")
        if not sep or not class_name or not method_name:
            raise SelectorError(f"Method selector must look like 'module.Class#method': {text!r}")
        return cls(class_target=class_name, method_name=method_name)

    @property
    def class_selector(self) -> ClassSelector:
        return ClassSelector(self.class_target)


@dataclass(frozen=True, slots=True)
class PackageSelector:
    package_name: str

    def __post_init__(self) -> None:
        if not self.package_name:
            raise SelectorError("PackageSelector.package_name must be a non-empty string")


@dataclass(frozen=True, slots=True)
class PathSelector:
    # Filesystem root scanned for *.py modules declaring scenario classes.
    root: Path


Selector = ClassSelector | MethodSelector | PackageSelector | PathSelector
