"""Fluent wiring facade.

Collects documents, step implementations, transforms and hooks, then runs
everything through the Runner::

    report = (
        SpecContext()
        .with_document_file(Path("specs/calculator.md"))
        .with_steps({r"(-?\\d+) plus (-?\\d+) is (-?\\d+)": add})
        .run()
    )

Registration problems are reported as warning diagnostics and collected in
``registration_errors``; the offending entry is left out and wiring continues.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TypeVar

from spec_kernel.adapters.host import LocalHost
from spec_kernel.adapters.registry import SinkRegistry
from spec_kernel.app.composition_root import build_log_sink, build_report_sink, build_sink_registry
from spec_kernel.config.loader import load_engine_config
from spec_kernel.config.models import EngineConfig
from spec_kernel.domain.model import SpecDocument
from spec_kernel.kernel.hooks import Hook, Hooks
from spec_kernel.kernel.outcome import RunReport
from spec_kernel.kernel.runner import Runner
from spec_kernel.kernel.step_registry import StepRegistrationError, StepRegistry
from spec_kernel.kernel.transforms import Converter, TransformRegistrationError, TransformRegistry
from spec_kernel.observability.domain.logging import LogMessage
from spec_kernel.parsing.parser import parse_document, parse_document_file
from spec_kernel.ports.host import HostRunner
from spec_kernel.ports.log_sink import LogSink
from spec_kernel.ports.report_sink import ReportSink

F = TypeVar("F", bound=Callable[..., object])


class SpecContext:
    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        log_sink: LogSink | None = None,
        report_sink: ReportSink | None = None,
        sinks: SinkRegistry | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        registry = sinks or build_sink_registry()
        self.log_sink = log_sink or build_log_sink(self.config.logging, registry)
        self.report_sink = report_sink or build_report_sink(self.config.report, registry)
        self.steps = StepRegistry()
        self.transforms = TransformRegistry.with_builtins() if self.config.builtin_transforms else TransformRegistry()
        self.hooks = Hooks()
        self.documents: list[SpecDocument] = []
        self.registration_errors: list[ValueError] = []

    @classmethod
    def from_config_file(cls, path: Path, **overrides: object) -> SpecContext:
        return cls(load_engine_config(path), **overrides)  # type: ignore[arg-type]

    # -- documents -------------------------------------------------------------

    def with_document(self, text: str, path: str = "") -> SpecContext:
        self.documents.append(parse_document(text, path=path))
        return self

    def with_document_file(self, path: Path) -> SpecContext:
        self.documents.append(parse_document_file(path))
        return self

    def with_documents(self, documents: Iterable[SpecDocument]) -> SpecContext:
        self.documents.extend(documents)
        return self

    # -- registration ----------------------------------------------------------

    def with_steps(self, steps: Mapping[str, Callable[..., object]]) -> SpecContext:
        for pattern, implementation in steps.items():
            self._register_step(pattern, implementation)
        return self

    def step(self, pattern: str) -> Callable[[F], F]:
        # Decorator form of with_steps for a single implementation.
        def _decorate(implementation: F) -> F:
            self._register_step(pattern, implementation)
            return implementation

        return _decorate

    def with_transforms(self, transforms: Mapping[str, Converter]) -> SpecContext:
        # The target type of each converter is its return annotation.
        for pattern, converter in transforms.items():
            try:
                target = _return_type(pattern, converter)
                self.transforms.register(pattern, target, converter)
            except TransformRegistrationError as exc:
                self._report_registration(exc, pattern=pattern)
        return self

    def with_transform(self, pattern: str, target: object, converter: Converter) -> SpecContext:
        try:
            self.transforms.register(pattern, target, converter)
        except TransformRegistrationError as exc:
            self._report_registration(exc, pattern=pattern)
        return self

    # -- hooks -----------------------------------------------------------------

    def before_document(self, hook: Hook) -> SpecContext:
        self.hooks.before_document.append(hook)
        return self

    def after_document(self, hook: Hook) -> SpecContext:
        self.hooks.after_document.append(hook)
        return self

    def before_step(self, hook: Hook) -> SpecContext:
        self.hooks.before_step.append(hook)
        return self

    def after_step(self, hook: Hook) -> SpecContext:
        self.hooks.after_step.append(hook)
        return self

    # -- execution -------------------------------------------------------------

    def runner(self) -> Runner:
        return Runner(
            steps=self.steps,
            transforms=self.transforms,
            log_sink=self.log_sink,
            hooks=self.hooks,
            report_sink=self.report_sink,
            capture=self.config.capture_output,
            warn_unused_steps=self.config.warn_unused_steps,
        )

    def run(self, host: HostRunner | None = None) -> RunReport:
        return self.runner().run(self.documents, host or LocalHost())

    def close(self) -> None:
        for target in (self.report_sink, self.log_sink):
            close = getattr(target, "close", None)
            if callable(close):
                close()

    def _register_step(self, pattern: str, implementation: object) -> None:
        try:
            self.steps.register(pattern, implementation)
        except StepRegistrationError as exc:
            self._report_registration(exc, pattern=pattern)

    def _report_registration(self, error: ValueError, *, pattern: str) -> None:
        self.registration_errors.append(error)
        self.log_sink.emit(LogMessage(level="warning", message=str(error), fields={"pattern": pattern}))


def _return_type(pattern: str, converter: Converter) -> object:
    if not callable(converter):
        raise TransformRegistrationError(f"transform {pattern!r} converter must be callable")
    try:
        annotation = inspect.signature(converter, eval_str=True).return_annotation
    except (TypeError, ValueError, NameError) as exc:
        raise TransformRegistrationError(f"transform {pattern!r} has no usable signature: {exc}") from exc
    if annotation is inspect.Signature.empty:
        raise TransformRegistrationError(f"transform {pattern!r} must declare its return type")
    return annotation
