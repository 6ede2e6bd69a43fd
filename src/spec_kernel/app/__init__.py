from .composition_root import build_log_sink, build_report_sink, build_sink_registry
from .context import SpecContext

__all__ = ["SpecContext", "build_log_sink", "build_report_sink", "build_sink_registry"]
