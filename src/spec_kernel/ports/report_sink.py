from __future__ import annotations

from typing import Protocol, runtime_checkable

from spec_kernel.observability.domain.reporting import ReportEvent


# ReportSink receives unit verdicts in execution order; rendering them is the sink's business.
@runtime_checkable
class ReportSink(Protocol):
    def emit(self, event: ReportEvent) -> None:
        """Consume one ReportEvent."""
        raise NotImplementedError("ReportSink is a port; use a concrete adapter.")

    def flush(self) -> None:
        """Flush buffered output if supported."""
        raise NotImplementedError("ReportSink is a port; use a concrete adapter.")

    def close(self) -> None:
        """Close the sink and release resources."""
        raise NotImplementedError("ReportSink is a port; use a concrete adapter.")
