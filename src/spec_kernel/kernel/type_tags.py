from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass


class UnsupportedAnnotationError(TypeError):
    # Raised when a parameter annotation cannot be expressed as a TypeTag.
    pass


@dataclass(frozen=True, slots=True)
class TypeTag:
    """Explicit runtime tag for a parameter type.

    Tags are derived once from an implementation's signature so that matching
    compares tags instead of reflecting on live values. ``list[int]`` becomes
    ``TypeTag(list, TypeTag(int))``; ``TypeTag(list)`` without an element is the
    generic key used by transforms that handle any list.
    """

    kind: type
    element: TypeTag | None = None

    @property
    def generic(self) -> TypeTag:
        return TypeTag(self.kind)

    def __str__(self) -> str:
        if self.element is None:
            return self.kind.__name__
        return f"{self.kind.__name__}[{self.element}]"


STR = TypeTag(str)
INT = TypeTag(int)


def type_tag(annotation: object) -> TypeTag:
    # Unannotated parameters receive the captured string unchanged.
    if annotation is inspect.Parameter.empty or annotation is typing.Any:
        return STR
    if isinstance(annotation, TypeTag):
        return annotation
    origin = typing.get_origin(annotation)
    if origin is list:
        args = typing.get_args(annotation)
        if len(args) > 1:
            raise UnsupportedAnnotationError(f"Unsupported annotation: {annotation!r}")
        return TypeTag(list, type_tag(args[0]) if args else STR)
    if origin is not None:
        raise UnsupportedAnnotationError(f"Unsupported annotation: {annotation!r}")
    if isinstance(annotation, type):
        return TypeTag(annotation)
    raise UnsupportedAnnotationError(f"Unsupported annotation: {annotation!r}")
