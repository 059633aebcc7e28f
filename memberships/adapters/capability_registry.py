"""
In-memory capability registry.

Process-local stand-in for the host platform's block registry. Satisfies
CapabilityHostPort.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field

from memberships.components.registrar import RenderCallback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnavailableCapability:
    """A capability the host was told is unavailable."""

    name: str
    reason: str
    details: dict[str, str] = field(default_factory=dict)


class InMemoryCapabilityRegistry:
    """Registered render callbacks and unavailable markers, keyed by name."""

    def __init__(self) -> None:
        self._callbacks: dict[str, RenderCallback] = {}
        self._unavailable: dict[str, UnavailableCapability] = {}
        self._lock = threading.Lock()

    def register_capability(self, name: str, render_callback: RenderCallback) -> None:
        with self._lock:
            self._unavailable.pop(name, None)
            self._callbacks[name] = render_callback
        logger.debug(f"Registered capability {name}")

    def set_capability_unavailable(
        self, name: str, reason: str, details: Mapping[str, str]
    ) -> None:
        with self._lock:
            self._callbacks.pop(name, None)
            self._unavailable[name] = UnavailableCapability(
                name=name, reason=reason, details=dict(details)
            )
        logger.debug(f"Capability {name} unavailable: {reason}")

    def get_callback(self, name: str) -> RenderCallback | None:
        return self._callbacks.get(name)

    def get_unavailable(self, name: str) -> UnavailableCapability | None:
        return self._unavailable.get(name)

    def is_registered(self, name: str) -> bool:
        return name in self._callbacks
