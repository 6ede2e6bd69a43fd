from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum

from spec_kernel.domain.values import Table, TextBlock
from spec_kernel.kernel.context import StepContext
from spec_kernel.kernel.step_registry import TABLE, StepImplementation, StepRegistry
from spec_kernel.kernel.transforms import TransformRegistry


class MatchKind(Enum):
    BOUND = "bound"
    NONE = "none"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True, slots=True)
class BoundCall:
    # Implementation plus its converted arguments; the StepContext is supplied at call time.
    implementation: StepImplementation
    args: tuple[object, ...]

    def __call__(self, ctx: StepContext) -> object:
        return self.implementation.fn(ctx, *self.args)


@dataclass(frozen=True, slots=True)
class MatchOutcome:
    kind: MatchKind
    call: BoundCall | None = None
    candidates: tuple[StepImplementation, ...] = field(default_factory=tuple)

    @property
    def bound(self) -> bool:
        return self.kind is MatchKind.BOUND


@dataclass(frozen=True, slots=True)
class StepMatcher:
    """Resolves step text to exactly one implementation.

    A candidate must fully match the text, take exactly as many trailing
    Table/TextBlock parameters as the step carries, and have every captured
    group convert to its declared type. Zero viable candidates is NONE, more
    than one is AMBIGUOUS; neither is ever executed.
    """

    steps: StepRegistry
    transforms: TransformRegistry

    def match(
        self,
        text: str,
        tables: Sequence[Table] = (),
        text_blocks: Sequence[TextBlock] = (),
    ) -> MatchOutcome:
        viable: list[BoundCall] = []
        for implementation in self.steps:
            call = self._bind(implementation, text, tables, text_blocks)
            if call is not None:
                viable.append(call)

        if len(viable) == 1:
            return MatchOutcome(kind=MatchKind.BOUND, call=viable[0], candidates=(viable[0].implementation,))
        if not viable:
            return MatchOutcome(kind=MatchKind.NONE)
        return MatchOutcome(
            kind=MatchKind.AMBIGUOUS,
            candidates=tuple(call.implementation for call in viable),
        )

    def _bind(
        self,
        implementation: StepImplementation,
        text: str,
        tables: Sequence[Table],
        text_blocks: Sequence[TextBlock],
    ) -> BoundCall | None:
        found = implementation.pattern.fullmatch(text)
        if found is None:
            return None
        if implementation.table_count != len(tables) or implementation.text_block_count != len(text_blocks):
            return None

        args: list[object] = []
        # Groups that did not participate in the match are offered as "".
        for raw, tag in zip(found.groups(default=""), implementation.param_tags):
            value, ok = self.transforms.convert(raw, tag)
            if not ok:
                return None
            args.append(value)

        args.extend(_trailing_args(implementation, iter(tables), iter(text_blocks)))
        return BoundCall(implementation=implementation, args=tuple(args))


def _trailing_args(
    implementation: StepImplementation,
    tables: Iterator[Table],
    text_blocks: Iterator[TextBlock],
) -> list[object]:
    # Tables and text blocks fill the trailing parameters in the order they are declared.
    return [next(tables) if tag == TABLE else next(text_blocks) for tag in implementation.trailing]
