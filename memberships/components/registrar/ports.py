"""
Registrar component ports.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol

RenderCallback = Callable[[Mapping[str, Any]], str]


class CapabilityHostPort(Protocol):
    """
    Host platform registration API.

    Implementations:
    - InMemoryCapabilityRegistry: process-local registry used by the HTTP app
    """

    def register_capability(self, name: str, render_callback: RenderCallback) -> None:
        """Expose a capability with its render callback."""
        ...

    def set_capability_unavailable(
        self, name: str, reason: str, details: Mapping[str, str]
    ) -> None:
        """Mark a capability unavailable with a structured reason."""
        ...
