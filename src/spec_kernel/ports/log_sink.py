from __future__ import annotations

from typing import Protocol, runtime_checkable

from spec_kernel.observability.domain.logging import LogMessage


@runtime_checkable
class LogSink(Protocol):
    def emit(self, message: LogMessage) -> None:
        """Consume one diagnostic message."""
        raise NotImplementedError("LogSink is a port; use a concrete adapter.")
