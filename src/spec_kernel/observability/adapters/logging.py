from __future__ import annotations

import json
import sys
from pathlib import Path

from spec_kernel.adapters.contracts import sink
from spec_kernel.observability.domain.logging import LogMessage


class StderrLogSink:
    # One JSON object per diagnostic on stderr, which step capture never touches.
    def __init__(self, min_level: str = "info") -> None:
        self._min_level = min_level

    def emit(self, message: LogMessage) -> None:
        if not message.at_least(self._min_level):
            return
        sys.stderr.write(_dumps(message) + "\n")


class JsonlLogSink:
    # File-backed structured diagnostics, appended line by line.
    def __init__(self, path: Path, min_level: str = "info") -> None:
        self._path = path
        self._min_level = min_level
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self._path.open("a", encoding="utf-8")

    def emit(self, message: LogMessage) -> None:
        if not message.at_least(self._min_level):
            return
        self._file.write(_dumps(message) + "\n")
        self._file.flush()

    def close(self) -> None:
        self._file.close()


class MemoryLogSink:
    # Keeps diagnostics in-process; handy for embedding and tests.
    def __init__(self, min_level: str = "debug") -> None:
        self._min_level = min_level
        self.messages: list[LogMessage] = []

    def emit(self, message: LogMessage) -> None:
        if message.at_least(self._min_level):
            self.messages.append(message)

    def by_level(self, level: str) -> list[LogMessage]:
        return [message for message in self.messages if message.level == level]


class NullLogSink:
    def emit(self, message: LogMessage) -> None:
        return None


@sink(name="stderr", role="log")
def log_stderr(settings: dict[str, object]) -> StderrLogSink:
    return StderrLogSink(min_level=_min_level(settings))


@sink(name="jsonl", role="log")
def log_jsonl(settings: dict[str, object]) -> JsonlLogSink:
    path = settings.get("path")
    if not isinstance(path, str) or not path:
        raise ValueError("log jsonl sink requires a non-empty settings.path")
    return JsonlLogSink(Path(path), min_level=_min_level(settings))


@sink(name="memory", role="log")
def log_memory(settings: dict[str, object]) -> MemoryLogSink:
    return MemoryLogSink(min_level=_min_level(settings, default="debug"))


@sink(name="none", role="log")
def log_none(settings: dict[str, object]) -> NullLogSink:
    _ = settings
    return NullLogSink()


def _min_level(settings: dict[str, object], default: str = "info") -> str:
    level = settings.get("min_level", default)
    return level if isinstance(level, str) else default


def _dumps(message: LogMessage) -> str:
    return json.dumps(
        {
            "level": message.level,
            "message": message.message,
            "timestamp": message.timestamp.isoformat().replace("+00:00", "Z"),
            "fields": message.fields,
        },
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
