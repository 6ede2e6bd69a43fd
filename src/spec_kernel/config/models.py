from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Config models map the YAML engine file to typed settings.

Level = Literal["debug", "info", "warning", "error"]


class LoggingConfig(BaseModel):
    # Where diagnostics go; "jsonl" needs a path.
    model_config = ConfigDict(extra="forbid")
    sink: Literal["stderr", "jsonl", "memory", "none"] = "stderr"
    path: str | None = None
    min_level: Level = "info"

    @model_validator(mode="after")
    def _require_path(self) -> LoggingConfig:
        if self.sink == "jsonl" and not self.path:
            raise ValueError("logging.path is required when logging.sink is 'jsonl'")
        return self


class ReportConfig(BaseModel):
    # Where unit verdicts go; "jsonl" needs a path.
    model_config = ConfigDict(extra="forbid")
    sink: Literal["memory", "jsonl"] = "memory"
    path: str | None = None
    flush_every_n: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _require_path(self) -> ReportConfig:
        if self.sink == "jsonl" and not self.path:
            raise ValueError("report.path is required when report.sink is 'jsonl'")
        return self


class EngineConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    capture_output: bool = True
    warn_unused_steps: bool = True
    builtin_transforms: bool = True
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
