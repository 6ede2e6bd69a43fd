from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from spec_kernel.domain.result import Result

UnitKind = Literal["document", "scenario", "step"]


@dataclass(frozen=True, slots=True)
class ReportEvent:
    """Verdict of one executed unit.

    Annotations carry reporting hints such as ``forced`` or the number of
    tables and text blocks a step was given.
    """

    kind: UnitKind
    name: str
    result: Result
    log: str = ""
    annotations: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.result is Result.NOTRUN:
            raise ValueError("ReportEvent.result must be a final result")
