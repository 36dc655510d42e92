"""Recursive descent parser producing a template node tree.

Consumes the Lexer's flat token stream and builds immutable nodes. Block
matching is done by the recursion itself: each ``{{#each}}`` or ``{{#if}}``
parses its body until it meets a close tag, so a close tag always pairs with
the innermost open block, at any depth and in any mix of block kinds.

Thread Safety:
Parser instances are single-use. The resulting Template is immutable and
safe to share across threads.

"""

from __future__ import annotations

from plantilla.errors import TemplateSyntaxError
from plantilla.lexer import Lexer
from plantilla.nodes import Each, If, Json, Markdown, Node, Partial, Template, Text, Variable
from plantilla.tokens import BLOCK_CLOSERS, Token, TokenType

# Tokens that end a body; the enclosing block decides whether they fit
_BODY_TERMINATORS = frozenset(
    {TokenType.EOF, TokenType.EACH_CLOSE, TokenType.IF_CLOSE, TokenType.ELSE}
)

_CLOSE_SPELLING = {
    TokenType.EACH_CLOSE: "{{/each}}",
    TokenType.IF_CLOSE: "{{/if}}",
}


class TokenNavigationMixin:
    """Token stream navigation for the parser.

    Required Host Attributes:
        - _tokens: list[Token]
        - _pos: int
        - _current: Token

    """

    _tokens: list[Token]
    _pos: int
    _current: Token

    def _advance(self) -> Token:
        """Advance to the next token and return it (EOF is sticky)."""
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
            self._current = self._tokens[self._pos]
        return self._current

    def _at(self, token_type: TokenType) -> bool:
        """Check the current token type."""
        return self._current.type is token_type


class Parser(TokenNavigationMixin):
    """Recursive descent parser for templates.

    Usage:
            >>> template = Parser("{{#each items}}{{name}}{{/each}}").parse()
            >>> template.children[0].path
            'items'

    """

    __slots__ = ("_source", "_source_file", "_tokens", "_pos", "_current")

    def __init__(self, source: str, source_file: str | None = None) -> None:
        """Initialize parser with template source.

        Args:
            source: Template text
            source_file: Optional template name for error messages
        """
        self._source = source
        self._source_file = source_file
        self._tokens: list[Token] = []
        self._pos = 0

    def parse(self) -> Template:
        """Parse the template into a node tree.

        Returns:
            Template root node

        Raises:
            TemplateSyntaxError: Unterminated tag or block, or a close tag
                with no matching open block
        """
        self._tokens = list(Lexer(self._source, self._source_file).tokenize())
        self._pos = 0
        self._current = self._tokens[0]

        children = self._parse_body()
        if not self._at(TokenType.EOF):
            raise self._stray_token_error(self._current)

        return Template(
            location=self._tokens[0].location,
            children=children,
            source_file=self._source_file,
        )

    def _parse_body(self) -> tuple[Node, ...]:
        """Parse nodes until EOF, a close tag or ``{{else}}``."""
        nodes: list[Node] = []
        while self._current.type not in _BODY_TERMINATORS:
            token = self._current
            match token.type:
                case TokenType.TEXT:
                    nodes.append(Text(location=token.location, content=token.value))
                    self._advance()
                case TokenType.VARIABLE:
                    nodes.append(Variable(location=token.location, path=token.value))
                    self._advance()
                case TokenType.EACH_OPEN:
                    nodes.append(self._parse_each(token))
                case TokenType.IF_OPEN:
                    nodes.append(self._parse_if(token))
                case TokenType.PARTIAL:
                    nodes.append(Partial(location=token.location, name=token.value))
                    self._advance()
                case TokenType.MARKDOWN_BLOCK | TokenType.MARKDOWN_INLINE:
                    nodes.append(
                        Markdown(
                            location=token.location,
                            path=token.value,
                            inline=token.type is TokenType.MARKDOWN_INLINE,
                        )
                    )
                    self._advance()
                case TokenType.JSON:
                    nodes.append(Json(location=token.location, path=token.value))
                    self._advance()
        return tuple(nodes)

    def _parse_each(self, opener: Token) -> Each:
        """Parse ``{{#each path}}`` through its matching ``{{/each}}``."""
        self._advance()
        body = self._parse_body()
        self._expect_close(opener)
        return Each(location=opener.location, path=opener.value, body=body)

    def _parse_if(self, opener: Token) -> If:
        """Parse ``{{#if path}}`` with optional ``{{else}}`` through ``{{/if}}``.

        Only an ``{{else}}`` at this block's own level is its else; one inside
        a nested block has already been consumed by that block.
        """
        self._advance()
        then_body = self._parse_body()
        else_body: tuple[Node, ...] | None = None
        if self._at(TokenType.ELSE):
            self._advance()
            else_body = self._parse_body()
            if self._at(TokenType.ELSE):
                raise self._error(
                    f"Duplicate {{{{else}}}} in {opener.raw}", self._current
                )
        self._expect_close(opener)
        return If(
            location=opener.location,
            path=opener.value,
            then_body=then_body,
            else_body=else_body,
        )

    def _expect_close(self, opener: Token) -> None:
        """Consume the close tag for opener or raise a structural error."""
        expected = BLOCK_CLOSERS[opener.type]
        current = self._current
        if current.type is expected:
            self._advance()
            return
        if current.type is TokenType.EOF:
            raise self._error(
                f"Unterminated block {opener.raw}: missing {_CLOSE_SPELLING[expected]}",
                opener,
            )
        if current.type is TokenType.ELSE:
            raise self._error(
                f"{{{{else}}}} inside {opener.raw} does not belong to an {{{{#if}}}} block",
                current,
            )
        raise self._error(
            f"Mismatched {current.raw}: expected {_CLOSE_SPELLING[expected]} "
            f"for {opener.raw} opened at {opener.location.lineno}:{opener.location.col_offset}",
            current,
        )

    def _stray_token_error(self, token: Token) -> TemplateSyntaxError:
        """Error for a close tag or else at top level."""
        if token.type is TokenType.ELSE:
            return self._error("{{else}} outside of an {{#if}} block", token)
        return self._error(f"Unexpected {token.raw} with no open block", token)

    def _error(self, message: str, token: Token) -> TemplateSyntaxError:
        """Build a syntax error located at token."""
        loc = token.location
        return TemplateSyntaxError(
            message,
            lineno=loc.lineno,
            col_offset=loc.col_offset,
            source_file=self._source_file,
        )


def parse(source: str, *, source_file: str | None = None) -> Template:
    """Parse template source into a node tree.

    Args:
        source: Template text
        source_file: Optional template name for error messages

    Returns:
        Template root node

    Example:
        >>> parse("Hello {{name}}").children
        (Text(...), Variable(...))
    """
    return Parser(source, source_file=source_file).parse()


__all__ = ["Parser", "parse"]
