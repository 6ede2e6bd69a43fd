from __future__ import annotations

import json
from pathlib import Path

from spec_kernel.adapters.contracts import sink
from spec_kernel.observability.domain.reporting import ReportEvent


class MemoryReportSink:
    # Collects events in emission order.
    def __init__(self) -> None:
        self.events: list[ReportEvent] = []

    def emit(self, event: ReportEvent) -> None:
        self.events.append(event)

    def flush(self) -> None:
        return None

    def close(self) -> None:
        return None

    def of_kind(self, kind: str) -> list[ReportEvent]:
        return [event for event in self.events if event.kind == kind]


class JsonlReportSink:
    # One ReportEvent per line; a renderer can rebuild the hierarchy from the order.
    def __init__(self, *, path: Path, flush_every_n: int = 1) -> None:
        self._path = path
        self._flush_every_n = max(1, flush_every_n)
        self._emit_count = 0
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self._path.open("a", encoding="utf-8")

    def emit(self, event: ReportEvent) -> None:
        self._handle.write(json.dumps(event_to_dict(event), separators=(",", ":"), ensure_ascii=False, default=str))
        self._handle.write("\n")
        self._emit_count += 1
        if self._emit_count % self._flush_every_n == 0:
            self.flush()

    def flush(self) -> None:
        self._handle.flush()

    def close(self) -> None:
        self.flush()
        self._handle.close()


def event_to_dict(event: ReportEvent) -> dict[str, object]:
    return {
        "kind": event.kind,
        "name": event.name,
        "result": str(event.result),
        "log": event.log,
        "annotations": event.annotations,
    }


@sink(name="memory", role="report")
def report_memory(settings: dict[str, object]) -> MemoryReportSink:
    _ = settings
    return MemoryReportSink()


@sink(name="jsonl", role="report")
def report_jsonl(settings: dict[str, object]) -> JsonlReportSink:
    path = settings.get("path")
    if not isinstance(path, str) or not path:
        raise ValueError("report jsonl sink requires a non-empty settings.path")
    flush_every_n = settings.get("flush_every_n", 1)
    if not isinstance(flush_every_n, int):
        raise ValueError("report jsonl sink settings.flush_every_n must be an integer")
    return JsonlReportSink(path=Path(path), flush_every_n=flush_every_n)
