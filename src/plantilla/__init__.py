"""
Plantilla — multilingual static-site generator

Merges per-language content records with HTML templates written in a small
mustache-like tag vocabulary:

    {{path.to.value}}                     interpolation (raw, unescaped)
    {{#each items}}...{{/each}}           loop (_value, _index, _first, _last, _parent)
    {{#if flag}}...{{else}}...{{/if}}     conditional
    {{> name}}                            partial inclusion
    {{md path}} / {{mdi path}}            block / inline markdown
    {{json path}}                         pretty-printed JSON

Quick Start:
    >>> from plantilla import render
    >>> render("{{#each apps}}<li>{{name}}</li>{{/each}}", {"apps": [{"name": "Mood"}]})
    '<li>Mood</li>'

    >>> from plantilla import render_block
    >>> render_block("**Private** by design.")
    '<p><strong>Private</strong> by design.</p>'

Building a site:
    >>> from pathlib import Path
    >>> from plantilla import BuildConfig, build_site
    >>> report = build_site(BuildConfig(root=Path("site")))
"""

from plantilla.config import (
    BuildConfig,
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from plantilla.context import MISSING, Context, is_truthy, merge_context, stringify
from plantilla.errors import BuildError, PlantillaError, RenderError, TemplateSyntaxError
from plantilla.lexer import Lexer
from plantilla.location import SourceLocation
from plantilla.markdown import render_block, render_inline
from plantilla.nodes import Each, If, Json, Markdown, Node, Partial, Template, Text, Variable
from plantilla.parser import Parser, parse
from plantilla.partials import PartialRegistry, PartialRegistryBuilder
from plantilla.renderer import RenderWarning, TemplateRenderer, render
from plantilla.site import BuildReport, PageFailure, SiteBuilder, build_context, build_site
from plantilla.tokens import Token, TokenType

__version__ = "0.1.0"


__all__ = [  # noqa: RUF022 - grouped by category
    # Version
    "__version__",
    # Core API
    "parse",
    "render",
    "render_block",
    "render_inline",
    # Renderer
    "TemplateRenderer",
    "RenderWarning",
    "PartialRegistry",
    "PartialRegistryBuilder",
    # Context
    "Context",
    "MISSING",
    "is_truthy",
    "merge_context",
    "stringify",
    # Nodes
    "Node",
    "Template",
    "Text",
    "Variable",
    "Each",
    "If",
    "Partial",
    "Markdown",
    "Json",
    # Parser components
    "Lexer",
    "Parser",
    "Token",
    "TokenType",
    "SourceLocation",
    # Site build
    "BuildReport",
    "PageFailure",
    "SiteBuilder",
    "build_context",
    "build_site",
    # Configuration (ContextVar-based)
    "BuildConfig",
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
    # Errors
    "PlantillaError",
    "TemplateSyntaxError",
    "RenderError",
    "BuildError",
]
