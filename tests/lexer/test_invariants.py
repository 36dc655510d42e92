"""Property-based tests for lexer invariants using Hypothesis."""

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from plantilla.errors import TemplateSyntaxError
from plantilla.lexer import Lexer
from plantilla.tokens import TokenType

# Template-ish text: plenty of braces and keywords
template_text = st.lists(
    st.sampled_from([*"{}#/> abc.\n", "{{", "}}", "each ", "if ", "else", "md ", "json "]),
    max_size=40,
).map("".join)


class TestLexerInvariants:
    """Invariants that hold for every input."""

    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_ends_with_single_eof_or_raises_syntax_error(self, source: str) -> None:
        try:
            tokens = list(Lexer(source).tokenize())
        except TemplateSyntaxError:
            return
        assert tokens[-1].type is TokenType.EOF
        assert sum(1 for t in tokens if t.type is TokenType.EOF) == 1

    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_text_without_open_delimiter_is_one_text_token(self, source: str) -> None:
        assume("{{" not in source)
        tokens = list(Lexer(source).tokenize())
        if source:
            assert [t.type for t in tokens] == [TokenType.TEXT, TokenType.EOF]
            assert tokens[0].value == source
        else:
            assert [t.type for t in tokens] == [TokenType.EOF]

    @given(template_text)
    @settings(max_examples=300)
    def test_raw_tokens_reassemble_source(self, source: str) -> None:
        try:
            tokens = list(Lexer(source).tokenize())
        except TemplateSyntaxError:
            return
        assert "".join(t.raw for t in tokens) == source

    @given(template_text)
    @settings(max_examples=300)
    def test_offsets_are_contiguous(self, source: str) -> None:
        try:
            tokens = list(Lexer(source).tokenize())
        except TemplateSyntaxError:
            return
        pos = 0
        for token in tokens:
            assert token._start_offset == pos
            pos = token._end_offset
        assert pos == len(source)
