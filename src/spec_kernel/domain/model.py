from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from spec_kernel.domain.values import Table, TextBlock


@dataclass(frozen=True, slots=True)
class Step:
    # One executable line of a spec; params hold <name> tokens left unresolved by any table.
    text: str
    params: tuple[str, ...] = ()
    tables: tuple[Table, ...] = ()
    text_blocks: tuple[TextBlock, ...] = ()
    force: bool = False

    @property
    def is_pending(self) -> bool:
        return bool(self.params)


@dataclass(frozen=True, slots=True)
class Scenario:
    name: str
    steps: tuple[Step, ...] = ()
    tables: tuple[Table, ...] = ()


@dataclass(frozen=True, slots=True)
class SpecDocument:
    """Parsed spec document.

    ``before_steps`` and ``after_steps`` are shared by every scenario; they are
    not copied into each scenario but combined at run time by ``steps_for``.
    """

    path: str
    name: str
    scenarios: tuple[Scenario, ...] = ()
    before_steps: tuple[Step, ...] = ()
    after_steps: tuple[Step, ...] = ()
    tables: tuple[Table, ...] = field(default_factory=tuple)

    def steps_for(self, scenario: Scenario) -> Sequence[Step]:
        if not scenario.steps:
            # A scenario without its own steps stays pending; shared steps do not make it runnable.
            return ()
        return (*self.before_steps, *scenario.steps, *self.after_steps)

    @property
    def title(self) -> str:
        return "/".join(part for part in (self.path, self.name) if part)
