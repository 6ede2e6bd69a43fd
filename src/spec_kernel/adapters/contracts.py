from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, TypeVar

T = TypeVar("T")

SinkRole = Literal["log", "report"]


@dataclass(frozen=True, slots=True)
class SinkMeta:
    # Declares which channel a sink factory serves and the name config refers to it by.
    name: str
    role: SinkRole


def sink(*, name: str | None = None, role: SinkRole) -> Callable[[T], T]:
    # Decorator attaches SinkMeta to a sink factory taking a settings mapping.

    def _decorate(target: T) -> T:
        resolved_name = name
        if not isinstance(resolved_name, str) or not resolved_name:
            resolved_name = getattr(target, "__name__", "")
        setattr(target, "__sink_meta__", SinkMeta(name=resolved_name, role=role))
        return target

    return _decorate


def get_sink_meta(target: object) -> SinkMeta | None:
    meta = getattr(target, "__sink_meta__", None)
    if isinstance(meta, SinkMeta):
        return meta
    return None
