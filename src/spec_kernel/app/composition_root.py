from __future__ import annotations

from spec_kernel.adapters.registry import SinkRegistry
from spec_kernel.config.models import LoggingConfig, ReportConfig
from spec_kernel.observability import sink_factories
from spec_kernel.ports.log_sink import LogSink
from spec_kernel.ports.report_sink import ReportSink


def build_sink_registry() -> SinkRegistry:
    return SinkRegistry.from_factories(sink_factories())  # type: ignore[arg-type]


def build_log_sink(config: LoggingConfig, registry: SinkRegistry | None = None) -> LogSink:
    registry = registry or build_sink_registry()
    built = registry.build("log", config.sink, {"path": config.path, "min_level": config.min_level})
    if not isinstance(built, LogSink):
        raise TypeError(f"log sink {config.sink!r} does not implement LogSink")
    return built


def build_report_sink(config: ReportConfig, registry: SinkRegistry | None = None) -> ReportSink:
    registry = registry or build_sink_registry()
    built = registry.build("report", config.sink, {"path": config.path, "flush_every_n": config.flush_every_n})
    if not isinstance(built, ReportSink):
        raise TypeError(f"report sink {config.sink!r} does not implement ReportSink")
    return built
