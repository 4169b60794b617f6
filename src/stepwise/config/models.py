from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Config models map YAML sections to typed structures; unknown keys fail fast.


class EngineSection(BaseModel):
    # Engine identity reported to hosts.
    model_config = ConfigDict(extra="forbid")
    id: str = Field(default="stepwise", min_length=1)
    display_name: str = Field(default="Stepwise", min_length=1)


class DiscoveryConfig(BaseModel):
    # Default selection when neither CLI selectors nor a filter are given.
    model_config = ConfigDict(extra="forbid")
    base_package: str | None = None
    packages: list[str] = Field(default_factory=list)
    roots: list[str] = Field(default_factory=list)


class FilterConfig(BaseModel):
    # Environment variable carrying colon-separated class/method filters.
    model_config = ConfigDict(extra="forbid")
    env_var: str = Field(default="TESTBRIDGE_TEST_ONLY", min_length=1)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    sink: Literal["stdout", "jsonl", "none"] = "none"
    path: str | None = None
    level: Literal["debug", "info", "warning", "error"] = "info"

    @model_validator(mode="after")
    def _jsonl_needs_path(self) -> LoggingConfig:
        if self.sink == "jsonl" and not self.path:
            raise ValueError("logging.path is required when logging.sink is 'jsonl'")
        return self


class RunnerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    fail_if_no_tests: bool = True


class EngineConfig(BaseModel):
    # Root config; every section is optional.
    model_config = ConfigDict(extra="forbid")
    version: int = 1
    engine: EngineSection = Field(default_factory=EngineSection)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
