"""Token and TokenType definitions for the template lexer.

The lexer turns a template string into a flat stream of Token objects that
the parser assembles into a node tree.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.

Performance Note:
Token stores raw offsets and creates its SourceLocation lazily; most
tokens never need one unless an error is reported.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from plantilla.location import SourceLocation


class TokenType(Enum):
    """Token types produced by the lexer."""

    EOF = auto()

    # Literal text between tags
    TEXT = auto()

    # {{path}}
    VARIABLE = auto()

    # Blocks
    EACH_OPEN = auto()  # {{#each path}}
    EACH_CLOSE = auto()  # {{/each}}
    IF_OPEN = auto()  # {{#if path}}
    ELSE = auto()  # {{else}}
    IF_CLOSE = auto()  # {{/if}}

    # Inclusion and filters
    PARTIAL = auto()  # {{> name}}
    MARKDOWN_BLOCK = auto()  # {{md path}}
    MARKDOWN_INLINE = auto()  # {{mdi path}}
    JSON = auto()  # {{json path}}


# Tokens that open a block and the token that must close it
BLOCK_CLOSERS: dict[TokenType, TokenType] = {
    TokenType.EACH_OPEN: TokenType.EACH_CLOSE,
    TokenType.IF_OPEN: TokenType.IF_CLOSE,
}


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the lexer.

    Attributes:
        type: The token type
        value: Literal text for TEXT, the argument for tags (path or
            partial name), empty for EOF and bare keywords
        raw: The tag as written in the source, braces included
        _start_offset: Absolute start position in source
        _end_offset: Absolute end position in source
        _source: The template source (for lazy line/column computation)
        _source_file: Optional template name

    """

    type: TokenType
    value: str
    raw: str
    _start_offset: int
    _end_offset: int
    _source: str = field(repr=False, compare=False)
    _source_file: str | None = None
    _location_cache: SourceLocation | None = field(
        default=None, repr=False, compare=False, hash=False
    )

    @property
    def location(self) -> SourceLocation:
        """Get source location (lazily created and cached)."""
        if self._location_cache is not None:
            return self._location_cache
        loc = SourceLocation.from_offset(
            self._source,
            self._start_offset,
            self._end_offset,
            source_file=self._source_file,
        )
        # Idempotent cache write on a frozen dataclass
        object.__setattr__(self, "_location_cache", loc)
        return loc

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, @{self._start_offset})"
