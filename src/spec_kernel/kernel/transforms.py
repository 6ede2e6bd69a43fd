"""Guarded string -> value conversion keyed by target type tag.

Every entry pairs a full-match guard pattern with a converter; only captured
strings that match the guard are offered to the converter. Converters signal
"cannot convert" by raising ``ValueError`` or ``TypeError``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from spec_kernel.kernel.type_tags import INT, STR, TypeTag, type_tag

Converter = Callable[[str], object]
# Targeted converters also receive the requested tag, e.g. to learn a list's element type.
TargetedConverter = Callable[[str, TypeTag], object]

LIST_PATTERN = r"[^,]+(?:,[^,]+)*"


class TransformRegistrationError(ValueError):
    pass


def anchor(pattern: str) -> str:
    # Patterns always describe the whole string.
    if not pattern.startswith("^"):
        pattern = "^" + pattern
    if not pattern.endswith("$"):
        pattern = pattern + "$"
    return pattern


@dataclass(frozen=True, slots=True)
class TransformEntry:
    pattern: re.Pattern[str]
    target: TypeTag
    converter: Converter | TargetedConverter
    targeted: bool = False

    def accepts(self, raw: str) -> bool:
        return self.pattern.fullmatch(raw) is not None

    def apply(self, raw: str, target: TypeTag) -> object:
        if self.targeted:
            return self.converter(raw, target)  # type: ignore[call-arg]
        return self.converter(raw)  # type: ignore[call-arg]


@dataclass
class TransformRegistry:
    _entries: dict[TypeTag, list[TransformEntry]] = field(default_factory=dict)

    @classmethod
    def with_builtins(cls) -> TransformRegistry:
        registry = cls()
        registry.register(r".*", STR, str)
        registry.register(r"-?[0-9]+", INT, int)
        registry.register(LIST_PATTERN, TypeTag(list), _CommaListConverter(registry), targeted=True)
        return registry

    def register(
        self,
        pattern: str,
        target: object,
        converter: Converter | TargetedConverter,
        *,
        targeted: bool = False,
    ) -> TransformEntry:
        if not callable(converter):
            raise TransformRegistrationError(f"transform {pattern!r} converter must be callable")
        try:
            tag = type_tag(target)
        except TypeError as exc:
            raise TransformRegistrationError(f"transform {pattern!r} has an invalid target: {exc}") from exc
        try:
            compiled = re.compile(anchor(pattern.strip()))
        except re.error as exc:
            raise TransformRegistrationError(
                f"transform {pattern!r} has an invalid regular expression: {exc}"
            ) from exc
        entry = TransformEntry(pattern=compiled, target=tag, converter=converter, targeted=targeted)
        self._entries.setdefault(tag, []).append(entry)
        return entry

    def entries_for(self, target: TypeTag) -> list[TransformEntry]:
        # Exact tag first, then the generic form (list[int] falls back to list).
        entries = list(self._entries.get(target, ()))
        if target.element is not None:
            entries.extend(self._entries.get(target.generic, ()))
        return entries

    def supports(self, target: TypeTag) -> bool:
        return bool(self.entries_for(target))

    def convert(self, raw: str, target: TypeTag) -> tuple[object, bool]:
        for entry in self.entries_for(target):
            if not entry.accepts(raw):
                continue
            try:
                return entry.apply(raw, target), True
            except (ValueError, TypeError):
                continue
        return None, False


@dataclass(frozen=True, slots=True)
class _CommaListConverter:
    # Splits on commas and converts every trimmed fragment via the owning registry.
    registry: TransformRegistry

    def __call__(self, raw: str, target: TypeTag) -> list[object]:
        element = target.element or STR
        values: list[object] = []
        for fragment in raw.split(","):
            value, ok = self.registry.convert(fragment.strip(), element)
            if not ok:
                raise ValueError(f"cannot convert {fragment.strip()!r} to {element}")
            values.append(value)
        return values
