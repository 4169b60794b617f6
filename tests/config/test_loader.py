from __future__ import annotations

from pathlib import Path

import pytest

from stepwise.config.loader import ConfigError, load_config, validate_config
from stepwise.config.models import EngineConfig


def test_load_config_happy_path(tmp_path: Path) -> None:
    # Every section maps to a typed model.
    path = tmp_path / "stepwise.yml"
    path.write_text(
        "\n".join(
            [
                "version: 1",
                "engine:",
                "  id: scenarios",
                "  display_name: Scenario Engine",
                "discovery:",
                "  base_package: stepwise_examples",
                "  packages:",
                "    - stepwise_examples",
                "filter:",
                "  env_var: ONLY_THESE",
                "logging:",
                "  sink: jsonl",
                "  path: logs/run.jsonl",
                "  level: debug",
                "runner:",
                "  fail_if_no_tests: false",
            ]
        ),
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert isinstance(cfg, EngineConfig)
    assert cfg.engine.id == "scenarios"
    assert cfg.discovery.packages == ["stepwise_examples"]
    assert cfg.filter.env_var == "ONLY_THESE"
    assert cfg.logging.level == "debug"
    assert cfg.runner.fail_if_no_tests is False


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.engine.id == "stepwise"
    assert cfg.filter.env_var == "TESTBRIDGE_TEST_ONLY"
    assert cfg.logging.sink == "none"


def test_unknown_key_fails(tmp_path: Path) -> None:
    # Unknown keys are rejected rather than ignored.
    path = tmp_path / "bad.yml"
    path.write_text("engine:\n  id: x\n  colour: blue\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_non_mapping_root_fails(tmp_path: Path) -> None:
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_invalid_yaml_fails(tmp_path: Path) -> None:
    path = tmp_path / "broken.yml"
    path.write_text("engine: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file_fails(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yml")


def test_unsupported_version_fails() -> None:
    with pytest.raises(ConfigError):
        validate_config({"version": 2})


def test_jsonl_sink_requires_path() -> None:
    with pytest.raises(ConfigError):
        validate_config({"logging": {"sink": "jsonl"}})
