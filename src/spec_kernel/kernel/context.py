from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spec_kernel.kernel.assertions import Assertion


class StepFailed(Exception):
    # Raised by fail_now(): stops the current step, which is reported failed.
    pass


class StepSkipped(Exception):
    # Raised by skip_now(): stops the current step, which is reported skipped.
    pass


@dataclass(slots=True)
class StepContext:
    """Handle passed as the first argument of every step implementation.

    It plays the part a host test object plays for an ordinary test: it can log
    into the step's captured output, mark the step failed (and optionally stop
    it) or stop it as skipped.
    """

    name: str
    document: str = ""
    scenario: str = ""
    errors: list[str] = field(default_factory=list)
    _failed: bool = False
    _skipped: bool = False

    @property
    def failed(self) -> bool:
        return self._failed

    @property
    def skipped(self) -> bool:
        return self._skipped

    def log(self, *values: object) -> None:
        # Written to stdout so it lands in the step's captured log.
        print(*values, file=sys.stdout)

    def fail(self) -> None:
        self._failed = True

    def error(self, message: str) -> None:
        self.errors.append(message)
        self.log(message)
        self.fail()

    def errorf(self, fmt: str, *args: object) -> None:
        self.error(fmt % args if args else fmt)

    def fail_now(self) -> None:
        self.fail()
        raise StepFailed(self.name)

    def fatal(self, message: str) -> None:
        self.error(message)
        raise StepFailed(message)

    def skip_now(self) -> None:
        self._skipped = True
        raise StepSkipped(self.name)

    def skip(self, message: str) -> None:
        self.log(message)
        self.skip_now()

    def assert_that(self, actual: object) -> Assertion:
        from spec_kernel.kernel.assertions import Assertion

        return Assertion(context=self, actual=actual)
