from .logging import LEVELS, LogMessage
from .reporting import ReportEvent, UnitKind

__all__ = ["LEVELS", "LogMessage", "ReportEvent", "UnitKind"]
