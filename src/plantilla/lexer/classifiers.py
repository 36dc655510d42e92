"""Tag classification mixin.

Pure logic: given the text between ``{{`` and ``}}``, decide what kind of
tag it is. No position changes happen here.
"""

from __future__ import annotations

from plantilla.tokens import TokenType

# Keyword tags that take an argument, in dispatch priority order
ARGUMENT_KEYWORDS: dict[str, TokenType] = {
    "#each": TokenType.EACH_OPEN,
    "#if": TokenType.IF_OPEN,
    "md": TokenType.MARKDOWN_BLOCK,
    "mdi": TokenType.MARKDOWN_INLINE,
    "json": TokenType.JSON,
}

# Token types that must always carry an argument, with the keyword shown in
# errors. Bare md, mdi and json are variable names.
REQUIRES_ARGUMENT: dict[TokenType, str] = {
    TokenType.EACH_OPEN: "#each",
    TokenType.IF_OPEN: "#if",
    TokenType.PARTIAL: ">",
}

CLOSE_KEYWORDS: dict[str, TokenType] = {
    "/each": TokenType.EACH_CLOSE,
    "/if": TokenType.IF_CLOSE,
}


class TagClassifierMixin:
    """Mixin classifying tag content into a token type and argument."""

    def _classify_tag(self, content: str) -> tuple[TokenType, str]:
        """Classify stripped tag content.

        Args:
            content: Text between the delimiters, already stripped

        Returns:
            (token_type, argument). For a missing argument on a keyword that
            requires one, the argument is the empty string and the caller
            reports the error.
        """
        if content.startswith(">"):
            return TokenType.PARTIAL, content[1:].strip()

        head, _, rest = content.partition(" ")
        if not rest:
            # Tabs and other whitespace are valid separators too
            parts = content.split(None, 1)
            head = parts[0] if parts else ""
            rest = parts[1] if len(parts) > 1 else ""
        arg = rest.strip()

        if head in ARGUMENT_KEYWORDS and (arg or ARGUMENT_KEYWORDS[head] in REQUIRES_ARGUMENT):
            return ARGUMENT_KEYWORDS[head], arg
        if head in CLOSE_KEYWORDS:
            return CLOSE_KEYWORDS[head], ""
        if content == "else":
            return TokenType.ELSE, ""
        return TokenType.VARIABLE, content
