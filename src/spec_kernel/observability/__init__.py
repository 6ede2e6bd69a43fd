from .domain import LogMessage, ReportEvent


def sink_factories() -> list[object]:
    # Built-in sink factories, registered by the composition root.
    from .adapters import log_jsonl, log_memory, log_none, log_stderr, report_jsonl, report_memory

    return [log_stderr, log_jsonl, log_memory, log_none, report_memory, report_jsonl]


__all__ = ["LogMessage", "ReportEvent", "sink_factories"]
