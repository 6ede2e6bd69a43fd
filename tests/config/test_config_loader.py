from __future__ import annotations

from pathlib import Path

import pytest

from spec_kernel.config.loader import ConfigError, load_engine_config, load_yaml_config, parse_engine_config
from spec_kernel.config.models import EngineConfig


def test_defaults_apply_without_a_file() -> None:
    config = load_engine_config()
    assert config == EngineConfig()
    assert config.capture_output
    assert config.warn_unused_steps
    assert config.builtin_transforms
    assert config.logging.sink == "stderr"
    assert config.logging.min_level == "info"
    assert config.report.sink == "memory"


def test_load_engine_config_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "engine.yml"
    path.write_text(
        "\n".join(
            [
                "capture_output: false",
                "warn_unused_steps: false",
                "logging:",
                "  sink: jsonl",
                f"  path: {tmp_path / 'engine.jsonl'}",
                "  min_level: warning",
                "report:",
                "  sink: jsonl",
                f"  path: {tmp_path / 'report.jsonl'}",
                "  flush_every_n: 10",
            ]
        ),
        encoding="utf-8",
    )
    config = load_engine_config(path)
    assert not config.capture_output
    assert not config.warn_unused_steps
    assert config.logging.sink == "jsonl"
    assert config.logging.min_level == "warning"
    assert config.report.flush_every_n == 10


def test_empty_file_is_default_config(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_yaml_config(path) == {}
    assert load_engine_config(path) == EngineConfig()


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_engine_config(path)


def test_validation_errors_become_config_errors() -> None:
    # Unknown keys are rejected (extra="forbid").
    with pytest.raises(ConfigError):
        parse_engine_config({"capture": True})
    with pytest.raises(ConfigError):
        parse_engine_config({"logging": {"sink": "jsonl"}})
    with pytest.raises(ConfigError):
        parse_engine_config({"report": {"flush_every_n": 0}})
    with pytest.raises(ConfigError):
        parse_engine_config({"logging": {"min_level": "trace"}})
    assert issubclass(ConfigError, ValueError)
