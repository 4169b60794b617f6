from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TextIO

from stepwise.app.filters import parse_test_filter
from stepwise.config.loader import ConfigError, load_config
from stepwise.config.models import EngineConfig
from stepwise.engine.descriptor import DescriptorKind
from stepwise.engine.host import StepwiseEngine
from stepwise.engine.listener import CompositeListener, ExecutionListener, LoggingListener, RecordingListener
from stepwise.engine.selectors import ClassSelector, MethodSelector, PackageSelector, PathSelector, Selector
from stepwise.errors import SelectorError
from stepwise.observability.sinks import LevelFilterSink, build_log_sink

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stepwise", description="Run scenarios with one reported node per step")
    parser.add_argument("--config", help="Path to YAML config")
    parser.add_argument("--select-class", action="append", default=[], help="module.Class (repeatable)")
    parser.add_argument("--select-method", action="append", default=[], help="module.Class#method (repeatable)")
    parser.add_argument("--select-package", action="append", default=[], help="Package to scan (repeatable)")
    parser.add_argument("--select-root", action="append", default=[], help="Directory to scan (repeatable)")
    parser.add_argument("--filter", help="Colon-separated Class / Class#method / Class.method tokens")
    parser.add_argument("--log-sink", choices=["stdout", "jsonl", "none"], help="Override logging sink")
    parser.add_argument("--log-path", help="Override JSONL log path")
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"], help="Override log level")
    parser.add_argument("--allow-empty", action="store_true", help="Exit 0 when nothing was discovered")
    return parser


def parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def apply_cli_overrides(config: EngineConfig, args: argparse.Namespace) -> None:
    # CLI flags take precedence over the config file.
    if args.log_sink is not None:
        config.logging.sink = args.log_sink
    if args.log_path is not None:
        config.logging.path = args.log_path
    if args.log_level is not None:
        config.logging.level = args.log_level
    if args.allow_empty:
        config.runner.fail_if_no_tests = False
    if config.logging.sink == "jsonl" and not config.logging.path:
        raise ConfigError("A JSONL log sink needs --log-path or logging.path")


def collect_selectors(
    args: argparse.Namespace,
    config: EngineConfig,
    environ: Mapping[str, str],
) -> list[Selector]:
    # Explicit selectors first; then the filter (flag or env var); then configured defaults.
    selectors: list[Selector] = []
    selectors.extend(ClassSelector(name) for name in args.select_class)
    selectors.extend(MethodSelector.parse(text) for text in args.select_method)
    selectors.extend(PackageSelector(name) for name in args.select_package)
    selectors.extend(PathSelector(Path(root)) for root in args.select_root)
    if selectors:
        return selectors

    filter_text = args.filter if args.filter is not None else environ.get(config.filter.env_var, "")
    if filter_text.strip():
        return list(parse_test_filter(filter_text, config.discovery.base_package))

    discovery = config.discovery
    selectors.extend(PackageSelector(name) for name in discovery.packages)
    selectors.extend(PathSelector(Path(root)) for root in discovery.roots)
    if not selectors and discovery.base_package:
        selectors.append(PackageSelector(discovery.base_package))
    return selectors


def run(
    argv: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    out: TextIO | None = None,
) -> int:
    # Thin orchestration: config -> selectors -> discover -> execute -> summary + exit code.
    out = out if out is not None else sys.stdout
    args = parse_args(argv)
    try:
        config = load_config(Path(args.config)) if args.config else EngineConfig()
        apply_cli_overrides(config, args)
    except ConfigError as exc:
        out.write(f"stepwise: configuration error: {exc}\n")
        return EXIT_USAGE

    log_sink = build_log_sink(config.logging.sink, path=config.logging.path, level=config.logging.level)
    try:
        return _run_engine(config, args, environ if environ is not None else os.environ, out, log_sink)
    finally:
        if log_sink is not None:
            log_sink.close()


def _run_engine(
    config: EngineConfig,
    args: argparse.Namespace,
    environ: Mapping[str, str],
    out: TextIO,
    log_sink: LevelFilterSink | None,
) -> int:
    try:
        selectors = collect_selectors(args, config, environ)
    except SelectorError as exc:
        out.write(f"stepwise: invalid selector: {exc}\n")
        return EXIT_USAGE
    engine = StepwiseEngine(config, log_sink=log_sink)
    root = engine.discover(selectors)

    if not any(node.is_test or node.discovery_error is not None for node in root.walk()):
        out.write("stepwise: no scenarios found\n")
        return EXIT_USAGE if config.runner.fail_if_no_tests else EXIT_OK

    recorder = RecordingListener()
    listener: ExecutionListener = recorder
    if log_sink is not None:
        listener = CompositeListener(recorder, LoggingListener(log_sink))
    engine.execute(root, listener)

    steps = recorder.stats()
    containers = recorder.stats(kind=DescriptorKind.CONTAINER)
    out.write(
        f"stepwise: {steps.started} steps started, {steps.succeeded} succeeded, "
        f"{steps.failed} failed, {steps.aborted} aborted\n"
    )
    if containers.failed:
        out.write(f"stepwise: {containers.failed} container(s) failed\n")
    return EXIT_FAILED if steps.failed or containers.failed else EXIT_OK
