from .logging import (
    JsonlLogSink,
    MemoryLogSink,
    NullLogSink,
    StderrLogSink,
    log_jsonl,
    log_memory,
    log_none,
    log_stderr,
)
from .reporting import JsonlReportSink, MemoryReportSink, event_to_dict, report_jsonl, report_memory

__all__ = [
    "JsonlLogSink",
    "MemoryLogSink",
    "NullLogSink",
    "StderrLogSink",
    "log_jsonl",
    "log_memory",
    "log_none",
    "log_stderr",
    "JsonlReportSink",
    "MemoryReportSink",
    "event_to_dict",
    "report_jsonl",
    "report_memory",
]
