from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from spec_kernel.domain.model import Step
from spec_kernel.domain.result import Result
from spec_kernel.kernel.step_registry import StepImplementation


@dataclass(frozen=True, slots=True)
class StepOutcome:
    text: str
    result: Result
    log: str = ""
    # True when a forced step ran although its scenario was already degraded.
    forced: bool = False
    tables: int = 0
    text_blocks: int = 0
    reason: str | None = None
    error: str | None = None

    @classmethod
    def for_step(cls, step: Step, result: Result, **details: object) -> StepOutcome:
        return cls(
            text=step.text,
            result=result,
            tables=len(step.tables),
            text_blocks=len(step.text_blocks),
            **details,  # type: ignore[arg-type]
        )

    def annotations(self) -> dict[str, object]:
        notes: dict[str, object] = {"tables": self.tables, "text_blocks": self.text_blocks}
        if self.forced:
            notes["forced"] = True
        if self.reason is not None:
            notes["reason"] = self.reason
        if self.error is not None:
            notes["error"] = self.error
        return notes


@dataclass(frozen=True, slots=True)
class ScenarioOutcome:
    name: str
    result: Result
    steps: tuple[StepOutcome, ...] = ()


@dataclass(frozen=True, slots=True)
class DocumentOutcome:
    path: str
    name: str
    result: Result
    scenarios: tuple[ScenarioOutcome, ...] = ()
    error: str | None = None

    def counts(self) -> dict[Result, int]:
        # Scenario results per kind in precedence order; zero counts are omitted.
        tally = Counter(scenario.result for scenario in self.scenarios)
        return {result: tally[result] for result in sorted(tally)}


@dataclass(frozen=True, slots=True)
class RunReport:
    documents: tuple[DocumentOutcome, ...] = ()
    unused: tuple[StepImplementation, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not any(document.result.is_failure for document in self.documents)
