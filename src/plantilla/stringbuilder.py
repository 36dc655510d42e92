"""Output buffer for template rendering.

Each render() call owns one buffer; partials and loop bodies write into
the same buffer as the template that includes them.
"""

from __future__ import annotations


class StringBuilder:
    """Collects rendered fragments and joins them once at the end.

    Usage:
        >>> sb = StringBuilder()
        >>> sb.append("<li>").append("Mood").append("</li>").build()
        '<li>Mood</li>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, fragment: str) -> StringBuilder:
        # Unresolved tags stringify to "" and add nothing
        if fragment:
            self._parts.append(fragment)
        return self

    def build(self) -> str:
        return "".join(self._parts)
