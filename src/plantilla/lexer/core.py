"""Single-pass template lexer.

Scans forward for ``{{``, emits the text before it, then finds the matching
``}}`` and classifies the tag. Every step advances the position, so the
scan is O(n) in the template length.

Thread Safety:
Lexer instances are single-use. Create one per template string.

"""

from __future__ import annotations

from collections.abc import Iterator

from plantilla.errors import TemplateSyntaxError
from plantilla.lexer.classifiers import REQUIRES_ARGUMENT, TagClassifierMixin
from plantilla.location import SourceLocation
from plantilla.tokens import Token, TokenType

OPEN_DELIM = "{{"
CLOSE_DELIM = "}}"


class Lexer(TagClassifierMixin):
    """Template lexer producing a flat token stream.

    Usage:
            >>> for token in Lexer("Hi {{name}}!").tokenize():
            ...     print(token)
        Token(TEXT, 'Hi ', @0)
        Token(VARIABLE, 'name', @3)
        Token(TEXT, '!', @11)
        Token(EOF, '', @12)

    """

    __slots__ = ("_source", "_source_len", "_pos", "_source_file")

    def __init__(self, source: str, source_file: str | None = None) -> None:
        """Initialize lexer with template source.

        Args:
            source: Template text
            source_file: Optional template name for error messages
        """
        self._source = source
        self._source_len = len(source)
        self._pos = 0
        self._source_file = source_file

    def tokenize(self) -> Iterator[Token]:
        """Tokenize the template.

        Yields:
            Token objects, ending with EOF

        Raises:
            TemplateSyntaxError: A ``{{`` has no closing ``}}``, or a block
                keyword has no argument
        """
        source = self._source
        while self._pos < self._source_len:
            tag_start = source.find(OPEN_DELIM, self._pos)
            if tag_start == -1:
                yield self._make_token(TokenType.TEXT, source[self._pos :], self._pos, self._source_len)
                self._pos = self._source_len
                break

            if tag_start > self._pos:
                yield self._make_token(
                    TokenType.TEXT, source[self._pos : tag_start], self._pos, tag_start
                )

            tag_end = source.find(CLOSE_DELIM, tag_start + len(OPEN_DELIM))
            if tag_end == -1:
                raise self._error("Unterminated tag: '{{' has no closing '}}'", tag_start)

            end = tag_end + len(CLOSE_DELIM)
            content = source[tag_start + len(OPEN_DELIM) : tag_end].strip()
            token_type, arg = self._classify_tag(content)

            if token_type in REQUIRES_ARGUMENT and not arg:
                keyword = REQUIRES_ARGUMENT[token_type]
                raise self._error(f"Tag '{{{{{keyword}}}}}' is missing its argument", tag_start)

            yield Token(
                type=token_type,
                value=arg,
                raw=source[tag_start:end],
                _start_offset=tag_start,
                _end_offset=end,
                _source=source,
                _source_file=self._source_file,
            )
            self._pos = end

        yield self._make_token(TokenType.EOF, "", self._source_len, self._source_len)

    def _make_token(self, token_type: TokenType, value: str, start: int, end: int) -> Token:
        """Create a token whose raw text equals its value."""
        return Token(
            type=token_type,
            value=value,
            raw=value,
            _start_offset=start,
            _end_offset=end,
            _source=self._source,
            _source_file=self._source_file,
        )

    def _error(self, message: str, offset: int) -> TemplateSyntaxError:
        """Build a syntax error located at offset."""
        loc = SourceLocation.from_offset(self._source, offset, source_file=self._source_file)
        return TemplateSyntaxError(
            message,
            lineno=loc.lineno,
            col_offset=loc.col_offset,
            source_file=self._source_file,
        )


__all__ = ["CLOSE_DELIM", "OPEN_DELIM", "Lexer"]
