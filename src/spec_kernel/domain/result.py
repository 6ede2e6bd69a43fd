from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum


class Result(IntEnum):
    # Ordered by precedence: a container reports the worst result of its children.
    NOTRUN = -1
    PASSED = 0
    SKIPPED = 1
    PENDING = 2
    FAILED = 3
    PANICKED = 4

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_failure(self) -> bool:
        return self >= Result.FAILED

    @property
    def is_degraded(self) -> bool:
        # Anything worse than passed stops non-forced steps in a scenario.
        return self > Result.PASSED


def aggregate(results: Iterable[Result]) -> Result:
    # Empty containers are pending; NOTRUN never survives to a final report.
    final = [result for result in results if result is not Result.NOTRUN]
    if not final:
        return Result.PENDING
    return max(final)
