from __future__ import annotations

import importlib
import importlib.util
import inspect
import pkgutil
import sys
from pathlib import Path
from types import ModuleType

from stepwise.errors import SelectorError
from stepwise.kernel.scenario import has_scenarios
from stepwise.observability.domain.logging import LogMessage
from stepwise.observability.sinks import LogSink


class Scanner:
    # Turns selectors into candidate scenario classes; import problems are logged and skipped.
    def __init__(self, *, log_sink: LogSink | None = None) -> None:
        self._log_sink = log_sink

    def resolve_class(self, name: str) -> type:
        parts = name.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                module = importlib.import_module(module_name)
            except ImportError:
                continue
            target: object = module
            for attr in parts[split:]:
                target = getattr(target, attr, None)
                if target is None:
                    break
            if inspect.isclass(target):
                return target
            # Bare class names qualified with a package: search the package's modules.
            if split == len(parts) - 1 and hasattr(module, "__path__"):
                for candidate in self.classes_in_package(module_name):
                    if candidate.__name__ == parts[-1]:
                        return candidate
            break
        raise SelectorError(f"Cannot resolve class: {name}")

    def classes_in_module(self, module: ModuleType) -> list[type]:
        # Classes declared in the module itself (not re-exports), in definition order.
        return [
            value
            for value in module.__dict__.values()
            if inspect.isclass(value) and value.__module__ == module.__name__ and has_scenarios(value)
        ]

    def classes_in_package(self, package_name: str) -> list[type]:
        found: list[type] = []
        for module in self.modules_in_package(package_name):
            found.extend(self.classes_in_module(module))
        return found

    def classes_under_root(self, root: Path) -> list[type]:
        found: list[type] = []
        for module in self.modules_under_root(root):
            found.extend(self.classes_in_module(module))
        return found

    def modules_in_package(self, package_name: str) -> list[ModuleType]:
        try:
            root = importlib.import_module(package_name)
        except Exception as exc:  # noqa: BLE001 - unloadable packages are skipped, not fatal
            self._warn("package import failed", package=package_name, error=repr(exc))
            return []
        modules = [root]
        module_path = getattr(root, "__path__", None)
        if module_path is None:
            return modules
        infos = sorted(
            pkgutil.walk_packages(module_path, prefix=f"{root.__name__}.", onerror=self._walk_error),
            key=lambda info: info.name,
        )
        for info in infos:
            try:
                modules.append(importlib.import_module(info.name))
            except Exception as exc:  # noqa: BLE001 - unloadable modules are skipped, not fatal
                self._warn("module import failed", module=info.name, error=repr(exc))
        return modules

    def modules_under_root(self, root: Path) -> list[ModuleType]:
        root = root.resolve()
        if not root.is_dir():
            self._warn("scan root is not a directory", root=str(root))
            return []
        modules: list[ModuleType] = []
        for path in sorted(root.rglob("*.py")):
            relative = path.relative_to(root)
            if any(part.startswith(".") or part == "__pycache__" for part in relative.parts):
                continue
            parts = list(relative.with_suffix("").parts)
            if parts[-1] == "__init__":
                parts = parts[:-1]
            if not parts:
                continue
            module = self._load_file(".".join(parts), path)
            if module is not None:
                modules.append(module)
        return modules

    def _load_file(self, module_name: str, path: Path) -> ModuleType | None:
        existing = sys.modules.get(module_name)
        if existing is not None and getattr(existing, "__file__", None) == str(path):
            return existing
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            self._warn("module spec unavailable", path=str(path))
            return None
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:  # noqa: BLE001 - unloadable files are skipped, not fatal
            del sys.modules[module_name]
            self._warn("module import failed", path=str(path), error=repr(exc))
            return None
        return module

    def _walk_error(self, name: str) -> None:
        self._warn("package walk failed", package=name)

    def _warn(self, message: str, **fields: object) -> None:
        if self._log_sink is not None:
            self._log_sink.emit(LogMessage(level="warning", message=message, fields=dict(fields)))
