from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass

from spec_kernel.kernel.context import StepContext

_FAIL_FMT = "expected %r, got %r"


@dataclass(frozen=True, slots=True)
class Assertion:
    # Fluent checks; a failed check marks the step failed but lets it continue.
    context: StepContext
    actual: object

    def is_true(self) -> None:
        if self.actual is not True:
            self.context.errorf(_FAIL_FMT, True, self.actual)

    def is_false(self) -> None:
        if self.actual is not False:
            self.context.errorf(_FAIL_FMT, False, self.actual)

    def is_equal(self, expected: object) -> None:
        if self.actual != expected:
            self.context.errorf(_FAIL_FMT, expected, self.actual)

    def is_in(self, *options: object) -> None:
        if self.actual not in options:
            self.context.errorf("expected one of %r, got %r", options, self.actual)

    def is_not_empty(self) -> None:
        if not isinstance(self.actual, Sized) or len(self.actual) == 0:
            self.context.errorf("expected a non-empty value, got %r", self.actual)
