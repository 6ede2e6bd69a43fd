from __future__ import annotations

import traceback
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from spec_kernel.domain.model import Scenario, SpecDocument, Step
from spec_kernel.domain.result import Result, aggregate
from spec_kernel.kernel.capture import capture_output
from spec_kernel.kernel.context import StepContext, StepFailed, StepSkipped
from spec_kernel.kernel.hooks import Hook, Hooks
from spec_kernel.kernel.matcher import BoundCall, MatchKind, StepMatcher
from spec_kernel.kernel.outcome import DocumentOutcome, RunReport, ScenarioOutcome, StepOutcome
from spec_kernel.kernel.step_registry import StepImplementation, StepRegistry
from spec_kernel.kernel.transforms import TransformRegistry
from spec_kernel.observability.domain.logging import LogMessage
from spec_kernel.observability.domain.reporting import ReportEvent
from spec_kernel.ports.host import HostRunner
from spec_kernel.ports.log_sink import LogSink
from spec_kernel.ports.report_sink import ReportSink


@dataclass(frozen=True, slots=True)
class _Where:
    # Identity of the unit being executed, used in every diagnostic.
    document: SpecDocument
    scenario: str = ""
    step: str = ""

    def fields(self) -> dict[str, object]:
        found: dict[str, object] = {"path": self.document.path, "document": self.document.name}
        if self.scenario:
            found["scenario"] = self.scenario
        if self.step:
            found["step"] = self.step
        return found

    def __str__(self) -> str:
        parts = [self.document.path, self.document.name, self.scenario, self.step]
        return "/".join(part for part in parts if part)


@dataclass
class _RunState:
    matcher: StepMatcher
    used: set[int] = field(default_factory=set)


@dataclass(frozen=True, slots=True)
class Runner:
    """Executes parsed documents and reports a verdict for every unit.

    Every level runs in declared order and steps are resolved against the
    registries at run time. Errors raised by implementations or hooks never
    escape a unit: they become ``panicked`` results and diagnostics.
    """

    steps: StepRegistry
    transforms: TransformRegistry
    log_sink: LogSink
    hooks: Hooks = field(default_factory=Hooks)
    report_sink: ReportSink | None = None
    capture: bool = True
    warn_unused_steps: bool = True

    def run(self, documents: Iterable[SpecDocument], host: HostRunner) -> RunReport:
        state = _RunState(matcher=StepMatcher(steps=self.steps, transforms=self.transforms))
        self._check_transforms()

        outcomes: list[DocumentOutcome] = []
        for document in documents:
            # The host may stop the unit early (skip_now), so the outcome is handed out via a list.
            collected: list[DocumentOutcome] = []
            host.run(document.title, lambda unit, doc=document: self._run_document(doc, unit, state, collected))
            outcomes.extend(collected)

        unused = tuple(entry for entry in self.steps if id(entry) not in state.used)
        if self.warn_unused_steps:
            for entry in unused:
                self._log("warning", f"registered step {entry} is not used.", pattern=entry.source)

        if self.report_sink is not None:
            self.report_sink.flush()
        return RunReport(documents=tuple(outcomes), unused=unused)

    def _check_transforms(self) -> None:
        for entry, tag in self.steps.missing_transforms(self.transforms):
            self._log(
                "warning",
                f"registered step {entry} has a parameter type {str(tag)!r} for which no transforms exist.",
                pattern=entry.source,
                type=str(tag),
            )

    # -- documents -----------------------------------------------------------

    def _run_document(
        self,
        document: SpecDocument,
        host: HostRunner,
        state: _RunState,
        collected: list[DocumentOutcome],
    ) -> None:
        where = _Where(document)
        scenarios: list[ScenarioOutcome] = []
        error = self._run_hooks(self.hooks.before_document, where, "before document")

        if error is not None:
            # Setup failed: nothing under this document is executed.
            for scenario in document.scenarios:
                skipped = _skipped_scenario(document, scenario)
                scenarios.append(skipped)
                host.run(scenario.name, lambda unit: unit.skip_now())
            result = Result.PANICKED
        else:
            for scenario in document.scenarios:
                host.run(
                    scenario.name,
                    lambda unit, sc=scenario: self._run_scenario_unit(document, sc, unit, state, scenarios),
                )
            result = aggregate(outcome.result for outcome in scenarios)
            error = self._run_hooks(self.hooks.after_document, where, "after document")
            if error is not None:
                result = Result.PANICKED

        outcome = DocumentOutcome(
            path=document.path,
            name=document.name,
            result=result,
            scenarios=tuple(scenarios),
            error=_describe_error(error),
        )
        collected.append(outcome)
        self._report_document(outcome)

        if result.is_failure:
            host.fail()
        elif all(s.result in (Result.SKIPPED, Result.PENDING) for s in scenarios):
            host.skip_now()

    # -- scenarios -----------------------------------------------------------

    def _run_scenario_unit(
        self,
        document: SpecDocument,
        scenario: Scenario,
        host: HostRunner,
        state: _RunState,
        scenarios: list[ScenarioOutcome],
    ) -> None:
        outcome = self._run_scenario(document, scenario, state)
        scenarios.append(outcome)
        if outcome.result.is_failure:
            host.fail()
        elif outcome.result in (Result.SKIPPED, Result.PENDING):
            host.skip_now()

    def _run_scenario(self, document: SpecDocument, scenario: Scenario, state: _RunState) -> ScenarioOutcome:
        outcomes: list[StepOutcome] = []
        running = Result.PASSED
        halted = False

        for step in document.steps_for(scenario):
            if halted or (running.is_degraded and not step.force):
                outcomes.append(StepOutcome.for_step(step, Result.SKIPPED))
                continue
            where = _Where(document, scenario.name, step.text)
            outcome, halted = self._run_step(step, where, state, forced=running.is_degraded)
            outcomes.append(outcome)
            running = max(running, outcome.result)

        return ScenarioOutcome(
            name=scenario.name,
            result=aggregate(outcome.result for outcome in outcomes),
            steps=tuple(outcomes),
        )

    # -- steps ---------------------------------------------------------------

    def _run_step(self, step: Step, where: _Where, state: _RunState, *, forced: bool) -> tuple[StepOutcome, bool]:
        # Returns the outcome and whether the rest of the scenario must be skipped.
        if step.params:
            self._log("warning", f"step {where} has unresolved parameters {', '.join(step.params)}.", **where.fields())
            return StepOutcome.for_step(step, Result.PENDING, reason="unresolved parameters"), False

        match = state.matcher.match(step.text, step.tables, step.text_blocks)
        if match.kind is MatchKind.NONE:
            self._log("info", f"step {where} has no matching implementation.", **where.fields())
            return StepOutcome.for_step(step, Result.PENDING, reason="no matching implementation"), False
        if match.kind is MatchKind.AMBIGUOUS:
            self._report_ambiguous(where, match.candidates)
            return StepOutcome.for_step(step, Result.PENDING, reason="ambiguous"), False

        assert match.call is not None
        state.used.add(id(match.call.implementation))

        error = self._run_hooks(self.hooks.before_step, where, "before step")
        if error is not None:
            return (
                StepOutcome.for_step(step, Result.PANICKED, reason="before step hook", error=_describe_error(error)),
                True,
            )

        ctx = StepContext(name=step.text, document=where.document.name, scenario=where.scenario)
        with capture_output(self.capture) as captured:
            result, error = self._invoke(match.call, ctx)
        if result is Result.PANICKED:
            self._log_error(f"panic during step {where}: {error}", error, where)

        hook_error = self._run_hooks(self.hooks.after_step, where, "after step")
        if hook_error is not None:
            result = Result.PANICKED
            error = error or hook_error

        return (
            StepOutcome.for_step(
                step,
                result,
                log=captured.text,
                forced=forced,
                error=_describe_error(error) if error is not None else _join(ctx.errors),
            ),
            False,
        )

    def _invoke(self, call: BoundCall, ctx: StepContext) -> tuple[Result, BaseException | None]:
        try:
            call(ctx)
        except StepSkipped:
            return (Result.FAILED if ctx.failed else Result.SKIPPED), None
        except StepFailed:
            return Result.FAILED, None
        except AssertionError as exc:
            # A plain assert in an implementation is a test failure, not a crash.
            return Result.FAILED, exc
        except KeyboardInterrupt:
            raise
        except BaseException as exc:  # noqa: BLE001 - SystemExit from a step must not end the run
            return Result.PANICKED, exc
        if ctx.failed:
            return Result.FAILED, None
        if ctx.skipped:
            return Result.SKIPPED, None
        return Result.PASSED, None

    def _run_hooks(self, hooks: Sequence[Hook], where: _Where, point: str) -> BaseException | None:
        # The first failing hook stops the remaining hooks at this point.
        for hook in hooks:
            try:
                hook()
            except KeyboardInterrupt:
                raise
            except BaseException as exc:  # noqa: BLE001 - hook failures panic the unit instead of the run
                self._log_error(f"panic during {point} hook for {where}: {exc}", exc, where)
                return exc
        return None

    # -- reporting -----------------------------------------------------------

    def _report_ambiguous(self, where: _Where, candidates: Sequence[StepImplementation]) -> None:
        lines = [f"step {where.step!r} is ambiguous:"]
        lines.extend(f"  {candidate}" for candidate in candidates)
        self._log(
            "warning",
            "\n".join(lines),
            candidates=[str(candidate) for candidate in candidates],
            **where.fields(),
        )

    def _report_document(self, outcome: DocumentOutcome) -> None:
        if self.report_sink is None:
            return
        self.report_sink.emit(
            ReportEvent(
                kind="document",
                name=outcome.name,
                result=outcome.result,
                annotations={
                    "path": outcome.path,
                    "counts": {str(result): count for result, count in outcome.counts().items()},
                },
            )
        )
        for scenario in outcome.scenarios:
            self.report_sink.emit(ReportEvent(kind="scenario", name=scenario.name, result=scenario.result))
            for step in scenario.steps:
                self.report_sink.emit(
                    ReportEvent(
                        kind="step",
                        name=step.text,
                        result=step.result,
                        log=step.log,
                        annotations=step.annotations(),
                    )
                )

    def _log(self, level: str, message: str, **fields: object) -> None:
        self.log_sink.emit(LogMessage(level=level, message=message, fields=fields))

    def _log_error(self, message: str, error: BaseException | None, where: _Where) -> None:
        fields = where.fields()
        if error is not None:
            fields["error_type"] = type(error).__name__
            fields["traceback"] = "".join(traceback.format_exception(error))
        self._log("error", message, **fields)


def _skipped_scenario(document: SpecDocument, scenario: Scenario) -> ScenarioOutcome:
    steps = tuple(StepOutcome.for_step(step, Result.SKIPPED) for step in document.steps_for(scenario))
    return ScenarioOutcome(name=scenario.name, result=Result.SKIPPED, steps=steps)


def _describe_error(error: BaseException | None) -> str | None:
    if error is None:
        return None
    return f"{type(error).__name__}: {error}"


def _join(messages: list[str]) -> str | None:
    return "; ".join(messages) if messages else None
