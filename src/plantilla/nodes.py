"""Typed template nodes for Plantilla.

All nodes are frozen dataclasses with slots, so a parsed template can be
shared across threads and rendered any number of times.

Node Hierarchy:
Node
├── Template (root)
├── Text
├── Variable        {{path}}
├── Each            {{#each path}}...{{/each}}
├── If              {{#if path}}...{{else}}...{{/if}}
├── Partial         {{> name}}
├── Markdown        {{md path}} / {{mdi path}}
└── Json            {{json path}}

"""

from __future__ import annotations

from dataclasses import dataclass

from plantilla.location import SourceLocation


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all template nodes.

    Every node keeps its source location for error messages.
    """

    location: SourceLocation


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text copied to the output unchanged."""

    content: str


@dataclass(frozen=True, slots=True)
class Variable(Node):
    """Dotted-path interpolation: ``{{meta.title}}``."""

    path: str


@dataclass(frozen=True, slots=True)
class Each(Node):
    """Loop over a sequence.

    The body renders once per element against a derived context.
    """

    path: str
    body: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional block with an optional else branch.

    ``else_body`` is None when the block has no ``{{else}}``; an empty tuple
    means an ``{{else}}`` with nothing after it.
    """

    path: str
    then_body: tuple[Node, ...]
    else_body: tuple[Node, ...] | None = None


@dataclass(frozen=True, slots=True)
class Partial(Node):
    """Inclusion of a named partial: ``{{> header}}``."""

    name: str


@dataclass(frozen=True, slots=True)
class Markdown(Node):
    """Markdown conversion of a value.

    ``inline`` selects ``{{mdi}}`` (no paragraph wrapping) over ``{{md}}``.
    """

    path: str
    inline: bool = False


@dataclass(frozen=True, slots=True)
class Json(Node):
    """Pretty-printed JSON dump of a value: ``{{json schema}}``."""

    path: str


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node of a parsed template."""

    children: tuple[Node, ...]
    source_file: str | None = None


__all__ = [
    "Each",
    "If",
    "Json",
    "Markdown",
    "Node",
    "Partial",
    "Template",
    "Text",
    "Variable",
]
