"""Partial registry for ``{{> name}}`` inclusion.

Partials are loaded once per build and never change afterwards.

Thread Safety:
PartialRegistry is immutable after creation. Safe to share.
Use PartialRegistryBuilder for mutable construction.

Example:
    >>> builder = PartialRegistryBuilder()
    >>> builder.register("header", "<h1>{{title}}</h1>")
    >>> registry = builder.build()
    >>> registry.get("header")
    '<h1>{{title}}</h1>'
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from plantilla.utils.logger import get_logger

logger = get_logger(__name__)


class PartialRegistry(Mapping[str, str]):
    """Immutable mapping of partial name to template source."""

    __slots__ = ("_partials",)

    def __init__(self, partials: Mapping[str, str] | None = None) -> None:
        self._partials: Mapping[str, str] = MappingProxyType(dict(partials or {}))

    @classmethod
    def coerce(cls, partials: Mapping[str, str] | None) -> PartialRegistry:
        """Accept a registry or any plain mapping."""
        if isinstance(partials, PartialRegistry):
            return partials
        return cls(partials)

    @property
    def names(self) -> frozenset[str]:
        """Get all registered partial names."""
        return frozenset(self._partials)

    def __getitem__(self, name: str) -> str:
        return self._partials[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._partials)

    def __len__(self) -> int:
        return len(self._partials)

    def __repr__(self) -> str:
        return f"PartialRegistry({sorted(self._partials)!r})"


class PartialRegistryBuilder:
    """Mutable builder for PartialRegistry.

    Register sources by name (or load a directory), then call build().
    """

    __slots__ = ("_partials",)

    def __init__(self) -> None:
        self._partials: dict[str, str] = {}

    def register(self, name: str, source: str) -> PartialRegistryBuilder:
        """Register a partial. Re-registering a name replaces it."""
        if name in self._partials:
            logger.debug("Partial %r registered twice; keeping the later source", name)
        self._partials[name] = source
        return self

    def load_directory(self, directory: Path, suffix: str = ".html") -> PartialRegistryBuilder:
        """Register every ``*<suffix>`` file in directory, keyed by stem.

        A missing directory registers nothing.
        """
        if not directory.is_dir():
            logger.debug("No partials directory at %s", directory)
            return self
        for path in sorted(directory.iterdir()):
            if path.is_file() and path.suffix == suffix:
                self.register(path.stem, path.read_text(encoding="utf-8"))
        return self

    def build(self) -> PartialRegistry:
        """Create the immutable registry."""
        return PartialRegistry(self._partials)


__all__ = ["PartialRegistry", "PartialRegistryBuilder"]
