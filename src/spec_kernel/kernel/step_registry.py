from __future__ import annotations

import inspect
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from spec_kernel.domain.values import Table, TextBlock
from spec_kernel.kernel.context import StepContext
from spec_kernel.kernel.transforms import TransformRegistry, anchor
from spec_kernel.kernel.type_tags import TypeTag, UnsupportedAnnotationError, type_tag

TABLE = TypeTag(Table)
TEXT_BLOCK = TypeTag(TextBlock)

StepCallable = Callable[..., object]


class StepRegistrationError(ValueError):
    # Raised when a step implementation cannot be registered; the entry is not added.
    def __init__(self, pattern: str, implementation: object, reason: str) -> None:
        super().__init__(f"registered step {pattern!r} => [{describe(implementation)}] {reason}")
        self.pattern = pattern
        self.implementation = implementation
        self.reason = reason


@dataclass(frozen=True, slots=True)
class StepImplementation:
    """A validated pattern -> callable binding.

    ``param_tags`` are the tags of the string-captured parameters, in order;
    ``trailing`` lists the declared Table/TextBlock parameters that follow them.
    """

    source: str
    pattern: re.Pattern[str]
    fn: StepCallable
    param_tags: tuple[TypeTag, ...]
    trailing: tuple[TypeTag, ...] = ()

    @property
    def table_count(self) -> int:
        return sum(1 for tag in self.trailing if tag == TABLE)

    @property
    def text_block_count(self) -> int:
        return sum(1 for tag in self.trailing if tag == TEXT_BLOCK)

    def __str__(self) -> str:
        return f"{self.source!r} => [{describe(self.fn)}]"


@dataclass
class StepRegistry:
    # Implementations are kept in registration order; duplicates are allowed and surface as ambiguity.
    _implementations: list[StepImplementation] = field(default_factory=list)

    def register(self, pattern: str, implementation: object) -> StepImplementation:
        entry = build_implementation(pattern, implementation)
        self._implementations.append(entry)
        return entry

    def __iter__(self) -> Iterator[StepImplementation]:
        return iter(self._implementations)

    def __len__(self) -> int:
        return len(self._implementations)

    def missing_transforms(self, transforms: TransformRegistry) -> list[tuple[StepImplementation, TypeTag]]:
        # Parameters whose type no transform can ever produce; such steps can never match.
        missing: list[tuple[StepImplementation, TypeTag]] = []
        for entry in self._implementations:
            for tag in entry.param_tags:
                if not transforms.supports(tag):
                    missing.append((entry, tag))
        return missing


def build_implementation(pattern: str, implementation: object) -> StepImplementation:
    if not callable(implementation):
        raise StepRegistrationError(pattern, implementation, "must be a function.")

    try:
        compiled = re.compile(anchor(pattern.strip()))
    except re.error as exc:
        raise StepRegistrationError(
            pattern, implementation, f"has an invalid regular expression: {exc}."
        ) from exc

    try:
        signature = inspect.signature(implementation, eval_str=True)
    except (TypeError, ValueError, NameError) as exc:
        raise StepRegistrationError(pattern, implementation, f"has no usable signature: {exc}.") from exc

    params = list(signature.parameters.values())
    if any(p.kind not in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) for p in params):
        raise StepRegistrationError(
            pattern, implementation, "must take positional parameters only."
        )
    if not params or not _is_context(params[0].annotation):
        raise StepRegistrationError(
            pattern,
            implementation,
            "has an invalid implementation. The first parameter must be of type StepContext.",
        )

    try:
        tags = [type_tag(p.annotation) for p in params[1:]]
    except UnsupportedAnnotationError as exc:
        raise StepRegistrationError(pattern, implementation, f"{exc}.") from exc

    # Table/TextBlock parameters only count when they form the trailing run.
    split = len(tags)
    while split > 0 and tags[split - 1] in (TABLE, TEXT_BLOCK):
        split -= 1
    captured, trailing = tags[:split], tags[split:]

    if len(captured) != compiled.groups:
        plural = "" if compiled.groups == 1 else "s"
        raise StepRegistrationError(
            pattern,
            implementation,
            f"captures {compiled.groups} parameter{plural} but the supplied implementation takes {len(captured)}.",
        )

    return StepImplementation(
        source=pattern,
        pattern=compiled,
        fn=implementation,
        param_tags=tuple(captured),
        trailing=tuple(trailing),
    )


def describe(implementation: object) -> str:
    name = getattr(implementation, "__qualname__", None) or type(implementation).__name__
    try:
        return f"{name}{inspect.signature(implementation)}"  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return str(name)


def _is_context(annotation: object) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, StepContext)
