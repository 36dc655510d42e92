"""Layered render context for Plantilla templates.

A Context is a chain of layers consulted innermost-first. The root layer
holds the page's merged data. Each ``{{#each}}`` iteration pushes a layer
holding the loop item and its loop metadata, so the enclosing context is
never copied or mutated.

Reserved loop keys:
    _value   the current element, when it is not a mapping
    _index   zero-based position of the element
    _first   True for the first element
    _last    True for the last element
    _parent  the enclosing Context

Inside a loop body the reserved keys win over item fields of the same name.

Example:
    >>> ctx = Context.root({"title": "Apps", "items": [{"name": "Mood"}]})
    >>> child = ctx.child_for({"name": "Mood"}, index=0, length=1)
    >>> child.resolve("name"), child.resolve("title"), child.resolve("_first")
    ('Mood', 'Apps', True)
    >>> child.resolve("missing.deep") is MISSING
    True

Thread Safety:
Contexts are never mutated after construction. Safe to share across threads.

"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

VALUE_KEY = "_value"
INDEX_KEY = "_index"
FIRST_KEY = "_first"
LAST_KEY = "_last"
PARENT_KEY = "_parent"

RESERVED_KEYS = frozenset({VALUE_KEY, INDEX_KEY, FIRST_KEY, LAST_KEY, PARENT_KEY})


class _Missing:
    """Sentinel for a path that does not resolve.

    Distinct from None: ``{{json x}}`` prints ``null`` for a None value but
    nothing at all for a missing one.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class LoopFrame:
    """Loop metadata for one ``{{#each}}`` iteration."""

    value: Any
    index: int
    length: int

    @property
    def first(self) -> bool:
        return self.index == 0

    @property
    def last(self) -> bool:
        return self.index == self.length - 1

    @property
    def exposes_value(self) -> bool:
        """Non-mapping elements are reachable only through ``_value``."""
        return not isinstance(self.value, Mapping)


class Context:
    """One layer of the render context chain.

    Args:
        data: Mapping visible at this layer
        parent: Enclosing context (None for the root)
        loop: Loop metadata when this layer is a loop iteration
    """

    __slots__ = ("_data", "_parent", "_loop")

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        parent: Context | None = None,
        loop: LoopFrame | None = None,
    ) -> None:
        self._data: Mapping[str, Any] = data if data is not None else {}
        self._parent = parent
        self._loop = loop

    @classmethod
    def root(cls, data: Mapping[str, Any] | Context | None = None) -> Context:
        """Wrap page data as a root context (contexts pass through)."""
        if isinstance(data, Context):
            return data
        return cls(data)

    @property
    def parent(self) -> Context | None:
        return self._parent

    @property
    def loop(self) -> LoopFrame | None:
        return self._loop

    def child_for(self, item: Any, index: int, length: int) -> Context:
        """Build the derived context for one loop element."""
        data = item if isinstance(item, Mapping) else None
        return Context(data, parent=self, loop=LoopFrame(item, index, length))

    def _reserved(self, key: str) -> Any:
        """Look up a reserved loop key on this layer only."""
        loop = self._loop
        if loop is None:
            return MISSING
        if key == INDEX_KEY:
            return loop.index
        if key == FIRST_KEY:
            return loop.first
        if key == LAST_KEY:
            return loop.last
        if key == PARENT_KEY:
            return self._parent if self._parent is not None else MISSING
        if key == VALUE_KEY and loop.exposes_value:
            return loop.value
        return MISSING

    def lookup(self, key: str) -> Any:
        """Resolve a single key through the chain, innermost layer first.

        Returns:
            The value, or MISSING when no layer defines the key
        """
        ctx: Context | None = self
        while ctx is not None:
            if key in RESERVED_KEYS:
                value = ctx._reserved(key)
                if value is not MISSING:
                    return value
            if key in ctx._data:
                return ctx._data[key]
            ctx = ctx._parent
        return MISSING

    def resolve(self, path: str) -> Any:
        """Resolve a dot-separated path.

        The first segment goes through the layer chain; later segments step
        into mappings by key, sequences by integer index and contexts by
        lookup. Anything else, including None, ends the path as MISSING.
        """
        if not path:
            return MISSING
        first, *rest = path.split(".")
        value = self.lookup(first)
        for segment in rest:
            if value is MISSING:
                break
            value = _step(value, segment)
        return value

    def flatten(self) -> dict[str, Any]:
        """Collapse the chain into one plain dict (inner layers win)."""
        merged: dict[str, Any] = {}
        if self._parent is not None:
            merged.update(self._parent.flatten())
        merged.update(self._data)
        if self._loop is not None:
            if self._loop.exposes_value:
                merged[VALUE_KEY] = self._loop.value
            merged[INDEX_KEY] = self._loop.index
            merged[FIRST_KEY] = self._loop.first
            merged[LAST_KEY] = self._loop.last
        return merged

    def __contains__(self, key: str) -> bool:
        return self.lookup(key) is not MISSING

    def __repr__(self) -> str:
        depth = 0
        ctx = self._parent
        while ctx is not None:
            depth += 1
            ctx = ctx._parent
        return f"Context(keys={sorted(self._data)!r}, depth={depth})"


def _step(value: Any, segment: str) -> Any:
    """Step one path segment into value."""
    match value:
        case Context():
            return value.lookup(segment)
        case Mapping():
            return value.get(segment, MISSING)
        case list() | tuple():
            if segment.isascii() and segment.isdigit() and int(segment) < len(value):
                return value[int(segment)]
            return MISSING
        case _:
            return MISSING


def is_truthy(value: Any) -> bool:
    """Truthiness used by ``{{#if}}``.

    Sequences are truthy iff non-empty, mappings and contexts always, and
    everything else by ordinary truthiness (MISSING, None, "", 0 and False
    are falsy).
    """
    match value:
        case list() | tuple():
            return len(value) > 0
        case Mapping() | Context():
            return True
        case float() if math.isnan(value):
            return False
        case _:
            return bool(value)


def stringify(value: Any) -> str:
    """Convert a resolved value to output text, unescaped.

    MISSING and None become "", booleans "true"/"false", integral floats
    their integer form, sequences comma-joined elements, mappings and
    contexts compact JSON.
    """
    match value:
        case str():
            return value
        case None:
            return ""
        case _Missing():
            return ""
        case bool():
            return "true" if value else "false"
        case float() if value.is_integer():
            return str(int(value))
        case list() | tuple():
            return ",".join(stringify(v) for v in value)
        case Mapping() | Context():
            return json.dumps(to_data(value), ensure_ascii=False, separators=(",", ":"))
        case _:
            return str(value)


def to_data(value: Any) -> Any:
    """Convert a resolved value to plain JSON-able data."""
    match value:
        case Context():
            return to_data(value.flatten())
        case Mapping():
            return {str(k): to_data(v) for k, v in value.items()}
        case list() | tuple():
            return [to_data(v) for v in value]
        case _:
            return value


def merge_context(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Shallow-merge mappings; keys in later layers win.

    Example:
        >>> merge_context({"a": 1, "b": 1}, None, {"b": 2})
        {'a': 1, 'b': 2}
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


__all__ = [
    "FIRST_KEY",
    "INDEX_KEY",
    "LAST_KEY",
    "MISSING",
    "PARENT_KEY",
    "RESERVED_KEYS",
    "VALUE_KEY",
    "Context",
    "LoopFrame",
    "is_truthy",
    "merge_context",
    "stringify",
    "to_data",
]
