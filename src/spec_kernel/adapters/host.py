from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field


class _StopUnit(Exception):
    # Unwinds a unit body after skip_now().
    pass


@dataclass
class LocalHost:
    """Self-contained HostRunner that records a tree of named units.

    Use it when no external test runner wraps the engine; ``exit_code`` gives
    the process status a command-line wrapper should return.
    """

    name: str = ""
    failed: bool = False
    skipped: bool = False
    children: list[LocalHost] = field(default_factory=list)

    def run(self, name: str, body: Callable[[LocalHost], None]) -> None:
        child = LocalHost(name=name)
        self.children.append(child)
        try:
            body(child)
        except _StopUnit:
            pass
        if child.failed:
            self.failed = True

    def fail(self) -> None:
        self.failed = True

    def skip_now(self) -> None:
        self.skipped = True
        raise _StopUnit(self.name)

    def walk(self) -> Iterator[LocalHost]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> LocalHost | None:
        return next((unit for unit in self.walk() if unit.name == name), None)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
