from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

Hook = Callable[[], object]


@dataclass
class Hooks:
    # Zero-argument callables run in registration order at each lifecycle point.
    before_document: list[Hook] = field(default_factory=list)
    after_document: list[Hook] = field(default_factory=list)
    before_step: list[Hook] = field(default_factory=list)
    after_step: list[Hook] = field(default_factory=list)
