from __future__ import annotations

from collections.abc import Iterable

from stepwise.config.models import EngineConfig
from stepwise.engine.descriptor import CLASS_SEGMENT, Descriptor, UniqueId, container
from stepwise.engine.discovery import ScenarioDiscoverer, class_name
from stepwise.engine.listener import ExecutionListener, ExecutionResult
from stepwise.engine.scanner import Scanner
from stepwise.engine.scheduler import StepScheduler
from stepwise.engine.selectors import ClassSelector, MethodSelector, PackageSelector, PathSelector, Selector
from stepwise.kernel.scenario import scenarios_of
from stepwise.observability.domain.logging import LogMessage
from stepwise.observability.sinks import LogSink


class StepwiseEngine:
    # Host-facing engine: static discovery up front, then replay of the captured steps.
    def __init__(self, config: EngineConfig | None = None, *, log_sink: LogSink | None = None) -> None:
        self._config = config or EngineConfig()
        self._log_sink = log_sink
        self._scanner = Scanner(log_sink=log_sink)
        self._discoverer = ScenarioDiscoverer(log_sink=log_sink)
        self._scheduler = StepScheduler()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def id(self) -> str:
        return self._config.engine.id

    def discover(self, selectors: Iterable[Selector], root_id: UniqueId | None = None) -> Descriptor:
        root = container(root_id or UniqueId.for_engine(self.id()), self._config.engine.display_name)
        for selector in selectors:
            if isinstance(selector, MethodSelector):
                cls = self._resolve(selector.class_selector)
                if cls is not None:
                    self._add_class(root, cls, only={selector.method_name})
            elif isinstance(selector, ClassSelector):
                cls = self._resolve(selector)
                if cls is not None:
                    self._add_class(root, cls)
            elif isinstance(selector, PackageSelector):
                for cls in self._scanner.classes_in_package(selector.package_name):
                    self._add_class(root, cls)
            elif isinstance(selector, PathSelector):
                for cls in self._scanner.classes_under_root(selector.root):
                    self._add_class(root, cls)
            else:
                raise TypeError(f"Unsupported selector: {selector!r}")

        tests = sum(1 for node in root.walk() if node.is_test)
        self._log("info", "discovery finished", classes=len(root.children), steps=tests)
        return root

    def execute(self, root: Descriptor, listener: ExecutionListener) -> None:
        root.reset_run_state()
        listener.execution_started(root)
        for child in root.children:
            self._execute_node(child, listener)
        listener.execution_finished(root, ExecutionResult.successful())

    def _execute_node(self, node: Descriptor, listener: ExecutionListener) -> None:
        listener.execution_started(node)
        if node.discovery_error is not None:
            listener.execution_finished(node, ExecutionResult.failed(node.discovery_error))
            return
        try:
            step_children = node.step_children()
            if step_children:
                self._scheduler.execute(step_children, listener)
            for child in node.children:
                if child.is_container:
                    self._execute_node(child, listener)
        except Exception as exc:  # noqa: BLE001 - bookkeeping failure is reported on this container only
            self._log("error", "container execution failed", id=str(node.unique_id), error=repr(exc))
            listener.execution_finished(node, ExecutionResult.failed(exc))
            return
        # Aggregate status is left to the host; containers themselves succeed.
        listener.execution_finished(node, ExecutionResult.successful())

    def _add_class(self, root: Descriptor, cls: type, *, only: set[str] | None = None) -> None:
        names = {entry.name for entry in scenarios_of(cls)}
        if not names or (only is not None and not names & only):
            self._log("warning", "no scenarios selected", cls=class_name(cls), methods=sorted(only or ()))
            return
        existing = root.find_child(root.unique_id.append(CLASS_SEGMENT, class_name(cls)))
        if existing is None:
            root.add_child(self._discoverer.discover_class(cls, root.unique_id, only=only))
        else:
            self._discoverer.extend_class(existing, cls, only=only)

    def _resolve(self, selector: ClassSelector) -> type | None:
        if not isinstance(selector.target, str):
            return selector.target
        try:
            return self._scanner.resolve_class(selector.target)
        except Exception as exc:  # noqa: BLE001 - unresolved selectors are skipped, not fatal
            self._log("warning", "class selector unresolved", selector=selector.name, error=repr(exc))
            return None

    def _log(self, level: str, message: str, **fields: object) -> None:
        if self._log_sink is not None:
            self._log_sink.emit(LogMessage(level=level, message=message, fields=dict(fields)))
