from .host import HostRunner
from .log_sink import LogSink
from .report_sink import ReportSink

# Public port exports keep wiring explicit at composition time.
__all__ = ["HostRunner", "LogSink", "ReportSink"]
