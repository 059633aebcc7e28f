"""
Asset requirement collector.

Records the client-side bundles a render needs so the page layer can
emit them. Satisfies AssetRequirementPort.
"""

from __future__ import annotations


class RequiredAssets:
    """Ordered, de-duplicated set of asset handles with their dependencies."""

    def __init__(self) -> None:
        self._assets: dict[str, tuple[str, ...]] = {}

    def require(self, handle: str, dependencies: tuple[str, ...] = ()) -> None:
        if handle not in self._assets:
            self._assets[handle] = tuple(dependencies)

    def handles(self) -> list[str]:
        """Handles in load order, dependencies first."""
        ordered: list[str] = []
        for handle, deps in self._assets.items():
            for dep in deps:
                if dep not in ordered:
                    ordered.append(dep)
            if handle not in ordered:
                ordered.append(handle)
        return ordered

    def to_dict(self) -> dict[str, list[str]]:
        return {handle: list(deps) for handle, deps in self._assets.items()}
