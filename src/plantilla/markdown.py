"""Markdown-subset converter used by the ``{{md}}`` and ``{{mdi}}`` tags.

Content records store translatable copy as a small markdown subset:

- ``**bold**`` becomes ``<strong>bold</strong>``
- ``[text](url)`` becomes a link that opens in a new tab
- a blank line separates paragraphs
- ``## `` and ``### `` start level-2 and level-3 headings
- a single newline is a line break

Both functions are total: they never raise, and malformed markup (an
unmatched ``**`` or a ``[label]`` with no ``(url)``) is left literal.

Example:
    >>> render_inline("**Free** for [everyone](https://example.com)")
    '<strong>Free</strong> for <a href="https://example.com" target="_blank" rel="noopener">everyone</a>'
    >>> render_block("## Pricing\\n\\nOne plan.")
    '<h2>Pricing</h2>\\n<p>One plan.</p>'

Thread Safety:
Compiled patterns are module-level constants; the functions keep no state.

"""

from __future__ import annotations

import re

from plantilla.config import get_render_config

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_LINK_RE = re.compile(r"\[(.+?)\]\((.+?)\)")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n{2,}")

_LINK_TEMPLATE = r'<a href="\2" target="_blank" rel="noopener">\1</a>'


def render_inline(text: object) -> str:
    """Convert inline markdown to an HTML fragment without paragraph tags.

    Substitutions run in order: bold, links, then line breaks.

    Args:
        text: Markdown source; anything that is not a non-empty str yields ""

    Returns:
        HTML fragment
    """
    if not isinstance(text, str) or not text:
        return ""
    html = _BOLD_RE.sub(r"<strong>\1</strong>", text)
    html = _LINK_RE.sub(_LINK_TEMPLATE, html)
    return html.replace("\n", get_render_config().line_break)


def render_block(text: object) -> str:
    """Convert block markdown into paragraphs and headings.

    Args:
        text: Markdown source; anything that is not a non-empty str yields ""

    Returns:
        HTML fragments joined by a single newline
    """
    if not isinstance(text, str) or not text:
        return ""

    blocks: list[str] = []
    for unit in _PARAGRAPH_SPLIT_RE.split(text):
        unit = unit.strip()
        if not unit:
            continue
        if unit.startswith("### "):
            blocks.append(f"<h3>{render_inline(unit[4:])}</h3>")
        elif unit.startswith("## "):
            blocks.append(f"<h2>{render_inline(unit[3:])}</h2>")
        else:
            blocks.append(f"<p>{render_inline(unit)}</p>")
    return "\n".join(blocks)


__all__ = ["render_block", "render_inline"]
