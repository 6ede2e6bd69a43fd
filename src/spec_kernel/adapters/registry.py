from __future__ import annotations

from collections.abc import Iterable
from typing import Callable

from spec_kernel.adapters.contracts import SinkRole, get_sink_meta

SinkFactory = Callable[[dict[str, object]], object]


class SinkRegistryError(ValueError):
    # Raised when sink lookup/build fails.
    pass


class SinkRegistry:
    # Registry of sink factories keyed by role + name.
    def __init__(self) -> None:
        self._factories: dict[tuple[SinkRole, str], SinkFactory] = {}

    @classmethod
    def from_factories(cls, factories: Iterable[SinkFactory]) -> SinkRegistry:
        registry = cls()
        for factory in factories:
            registry.register(factory)
        return registry

    def register(self, factory: SinkFactory) -> None:
        meta = get_sink_meta(factory)
        if meta is None:
            raise SinkRegistryError(f"{factory!r} is not declared with @sink")
        key = (meta.role, meta.name)
        if key in self._factories:
            raise SinkRegistryError(f"Duplicate sink registration: {meta.role}/{meta.name}")
        self._factories[key] = factory

    def build(self, role: SinkRole, name: str, settings: dict[str, object] | None = None) -> object:
        key = (role, name)
        if key not in self._factories:
            raise SinkRegistryError(f"Unknown {role} sink: {name}")
        return self._factories[key](dict(settings or {}))

    def names(self, role: SinkRole) -> list[str]:
        return sorted(name for kind, name in self._factories if kind == role)
