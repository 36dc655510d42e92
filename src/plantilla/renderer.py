"""Template renderer using the StringBuilder pattern.

Walks a parsed Template against a layered Context and produces the page
output. Output is raw: nothing is HTML-escaped.

Thread Safety:
All per-render state is encapsulated in RenderState, created fresh for each
render() call. Multiple threads can share one TemplateRenderer and call
render() concurrently; the partial registry is read-only.

"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from plantilla.config import RenderConfig, get_render_config
from plantilla.context import MISSING, Context, is_truthy, stringify, to_data
from plantilla.errors import RenderError
from plantilla.location import SourceLocation
from plantilla.markdown import render_block, render_inline
from plantilla.nodes import Each, If, Json, Markdown, Node, Partial, Template, Text, Variable
from plantilla.parser import parse
from plantilla.partials import PartialRegistry
from plantilla.stringbuilder import StringBuilder
from plantilla.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RenderWarning:
    """Non-fatal problem found while rendering.

    Attributes:
        kind: Short category, e.g. "missing-partial"
        message: Human-readable description
        location: Where the offending tag sits

    """

    kind: str
    message: str
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.location} {self.message}"


@dataclass(slots=True)
class RenderState:
    """Per-render mutable state.

    Created fresh for each render so a shared renderer stays thread-safe.
    """

    config: RenderConfig
    warnings: list[RenderWarning] = field(default_factory=list)
    partial_depth: int = 0


class TemplateRenderer:
    """Render templates against a context, including named partials.

    Usage:
        >>> renderer = TemplateRenderer({"price": "{{currency}}{{amount}}"})
        >>> renderer.render("<b>{{> price}}</b>", {"currency": "$", "amount": 5})
        '<b>$5</b>'

    """

    __slots__ = ("_partials", "_last_state")

    def __init__(self, partials: Mapping[str, str] | None = None) -> None:
        """Initialize renderer.

        Args:
            partials: Partial registry or plain name -> source mapping
        """
        self._partials = PartialRegistry.coerce(partials)
        self._last_state: RenderState | None = None

    @property
    def partials(self) -> PartialRegistry:
        return self._partials

    def render(
        self,
        template: str | Template,
        context: Mapping[str, Any] | Context | None = None,
        *,
        source_file: str | None = None,
    ) -> str:
        """Render a template.

        Args:
            template: Template source or an already parsed Template
            context: Page data (mapping) or a Context
            source_file: Template name for error messages (source input only)

        Returns:
            Rendered output

        Raises:
            TemplateSyntaxError: The template or an included partial is
                structurally broken
            RenderError: Partials nest deeper than max_partial_depth
        """
        tree = template if isinstance(template, Template) else parse(template, source_file=source_file)
        state = RenderState(config=get_render_config())
        sb = StringBuilder()
        self._render_nodes(tree.children, Context.root(context), sb, state)

        # Note: not thread-safe for get_warnings()
        self._last_state = state
        return sb.build()

    def get_warnings(self) -> list[RenderWarning]:
        """Get warnings collected during the last render.

        In multi-threaded use, read this right after render() in the same
        thread.
        """
        if self._last_state is None:
            return []
        return self._last_state.warnings.copy()

    # =========================================================================
    # Node rendering
    # =========================================================================

    def _render_nodes(
        self, nodes: tuple[Node, ...], ctx: Context, sb: StringBuilder, state: RenderState
    ) -> None:
        for node in nodes:
            self._render_node(node, ctx, sb, state)

    def _render_node(self, node: Node, ctx: Context, sb: StringBuilder, state: RenderState) -> None:
        match node:
            case Text():
                sb.append(node.content)
            case Variable():
                sb.append(stringify(ctx.resolve(node.path)))
            case Each():
                self._render_each(node, ctx, sb, state)
            case If():
                if is_truthy(ctx.resolve(node.path)):
                    self._render_nodes(node.then_body, ctx, sb, state)
                elif node.else_body is not None:
                    self._render_nodes(node.else_body, ctx, sb, state)
            case Partial():
                self._render_partial(node, ctx, sb, state)
            case Markdown():
                value = ctx.resolve(node.path)
                text = stringify(value)
                sb.append(render_inline(text) if node.inline else render_block(text))
            case Json():
                value = ctx.resolve(node.path)
                if value is not MISSING:
                    sb.append(
                        json.dumps(
                            to_data(value),
                            indent=state.config.json_indent,
                            ensure_ascii=False,
                            default=str,
                        )
                    )

    def _render_each(self, node: Each, ctx: Context, sb: StringBuilder, state: RenderState) -> None:
        """Render the loop body once per element, in order."""
        items = ctx.resolve(node.path)
        if not isinstance(items, (list, tuple)):
            return
        length = len(items)
        for index, item in enumerate(items):
            self._render_nodes(node.body, ctx.child_for(item, index, length), sb, state)

    def _render_partial(
        self, node: Partial, ctx: Context, sb: StringBuilder, state: RenderState
    ) -> None:
        """Render a partial against the current context."""
        source = self._partials.get(node.name)
        if source is None:
            message = f"Partial {node.name!r} not found"
            state.warnings.append(
                RenderWarning(kind="missing-partial", message=message, location=node.location)
            )
            if state.config.warn_missing_partials:
                logger.warning("%s (%s)", message, node.location)
            return
        if not source:
            logger.debug("Partial %r is empty (%s)", node.name, node.location)
            return

        if state.partial_depth >= state.config.max_partial_depth:
            raise RenderError(
                f"Partial {node.name!r} at {node.location} exceeds the maximum "
                f"inclusion depth of {state.config.max_partial_depth}"
            )

        tree = parse(source, source_file=node.name)
        state.partial_depth += 1
        try:
            self._render_nodes(tree.children, ctx, sb, state)
        finally:
            state.partial_depth -= 1


def render(
    template: str | Template,
    context: Mapping[str, Any] | Context | None = None,
    partials: Mapping[str, str] | None = None,
) -> str:
    """Render a template in one call.

    Example:
        >>> render("{{#each tags}}{{_value}}{{#if _last}}.{{else}}, {{/if}}{{/each}}",
        ...        {"tags": ["calm", "focus"]})
        'calm, focus.'
    """
    return TemplateRenderer(partials).render(template, context)


__all__ = ["RenderState", "RenderWarning", "TemplateRenderer", "render"]
