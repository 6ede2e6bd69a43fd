from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class HostRunner(Protocol):
    """The three things the engine needs from whatever test runner hosts it."""

    def run(self, name: str, body: Callable[[HostRunner], None]) -> None:
        """Run ``body`` as a named nested unit, passing the nested unit's handle."""
        raise NotImplementedError("HostRunner is a port; use a concrete adapter.")

    def fail(self) -> None:
        """Mark the current unit failed; execution continues."""
        raise NotImplementedError("HostRunner is a port; use a concrete adapter.")

    def skip_now(self) -> None:
        """Mark the current unit skipped and stop it."""
        raise NotImplementedError("HostRunner is a port; use a concrete adapter.")
