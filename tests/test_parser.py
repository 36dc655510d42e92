"""Tests for the template tree builder."""

import pytest

from plantilla.errors import TemplateSyntaxError
from plantilla.nodes import Each, If, Json, Markdown, Partial, Template, Text, Variable
from plantilla.parser import Parser, parse


class TestTreeShape:
    """Tests for the nodes produced by the parser."""

    def test_text_only(self) -> None:
        template = parse("<html></html>")
        assert isinstance(template, Template)
        assert len(template.children) == 1
        assert isinstance(template.children[0], Text)

    def test_empty_template(self) -> None:
        assert parse("").children == ()

    def test_leaf_tags(self) -> None:
        children = parse("{{a}}{{> nav}}{{md b}}{{mdi c}}{{json d}}").children
        assert [type(c) for c in children] == [Variable, Partial, Markdown, Markdown, Json]
        assert children[2].inline is False
        assert children[3].inline is True
        assert children[1].name == "nav"

    def test_each_body(self) -> None:
        (each,) = parse("{{#each items}}<li>{{name}}</li>{{/each}}").children
        assert isinstance(each, Each)
        assert each.path == "items"
        assert [type(c) for c in each.body] == [Text, Variable, Text]

    def test_if_without_else(self) -> None:
        (node,) = parse("{{#if flag}}yes{{/if}}").children
        assert isinstance(node, If)
        assert node.else_body is None

    def test_if_with_empty_else(self) -> None:
        (node,) = parse("{{#if flag}}yes{{else}}{{/if}}").children
        assert node.else_body == ()

    def test_else_binds_to_innermost_if(self) -> None:
        (outer,) = parse("{{#if a}}{{#if b}}X{{else}}Y{{/if}}{{else}}Z{{/if}}").children
        inner = outer.then_body[0]
        assert isinstance(inner, If)
        assert inner.path == "b"
        assert [c.content for c in inner.else_body] == ["Y"]
        assert [c.content for c in outer.else_body] == ["Z"]

    def test_same_kind_nesting(self) -> None:
        (outer,) = parse("{{#each a}}{{#each b}}{{x}}{{/each}}|{{/each}}").children
        inner = outer.body[0]
        assert isinstance(inner, Each) and inner.path == "b"
        assert isinstance(outer.body[1], Text)

    def test_mixed_nesting(self) -> None:
        source = "{{#each a}}{{#if x}}{{#each b}}{{#if y}}!{{/if}}{{/each}}{{/if}}{{/each}}"
        (each_a,) = parse(source).children
        if_x = each_a.body[0]
        each_b = if_x.then_body[0]
        if_y = each_b.body[0]
        assert (each_a.path, if_x.path, each_b.path, if_y.path) == ("a", "x", "b", "y")

    def test_deep_nesting(self) -> None:
        depth = 60
        source = "{{#if x}}" * depth + "core" + "{{/if}}" * depth
        node = parse(source).children[0]
        for _ in range(depth - 1):
            node = node.then_body[0]
        assert node.then_body[0].content == "core"

    def test_node_locations(self) -> None:
        template = parse("line\n{{#each items}}{{/each}}", source_file="list.html")
        each = template.children[1]
        assert each.location.lineno == 2
        assert each.location.col_offset == 1
        assert template.source_file == "list.html"

    def test_parsed_template_is_immutable(self) -> None:
        template = parse("{{x}}")
        with pytest.raises(AttributeError):
            template.children = ()  # type: ignore[misc]


class TestStructuralErrors:
    """Tests for unterminated and mismatched blocks."""

    def test_unterminated_each(self) -> None:
        with pytest.raises(TemplateSyntaxError, match=r"Unterminated block \{\{#each items\}\}"):
            parse("<ul>{{#each items}}<li>{{name}}</li>")

    def test_unterminated_if(self) -> None:
        with pytest.raises(TemplateSyntaxError, match=r"missing \{\{/if\}\}"):
            parse("{{#if flag}}yes{{else}}no")

    def test_unterminated_error_points_at_opener(self) -> None:
        with pytest.raises(TemplateSyntaxError) as exc:
            parse("a\nb\n   {{#each items}}\n\n")
        assert (exc.value.lineno, exc.value.col_offset) == (3, 4)

    def test_inner_close_does_not_satisfy_outer(self) -> None:
        with pytest.raises(TemplateSyntaxError, match="Unterminated"):
            parse("{{#each a}}{{#each b}}{{/each}}")

    def test_mismatched_close(self) -> None:
        with pytest.raises(TemplateSyntaxError, match=r"Mismatched \{\{/if\}\}"):
            parse("{{#each a}}{{/if}}")

    def test_stray_close_at_top_level(self) -> None:
        with pytest.raises(TemplateSyntaxError, match="no open block"):
            parse("text{{/each}}")

    def test_stray_else_at_top_level(self) -> None:
        with pytest.raises(TemplateSyntaxError, match="outside of an"):
            parse("a{{else}}b")

    def test_else_directly_inside_each(self) -> None:
        with pytest.raises(TemplateSyntaxError, match="does not belong"):
            parse("{{#each a}}x{{else}}y{{/each}}")

    def test_duplicate_else(self) -> None:
        with pytest.raises(TemplateSyntaxError, match="Duplicate"):
            parse("{{#if a}}1{{else}}2{{else}}3{{/if}}")

    def test_error_message_includes_source_file(self) -> None:
        with pytest.raises(TemplateSyntaxError) as exc:
            Parser("{{#if x}}", source_file="faq.html").parse()
        assert exc.value.source_file == "faq.html"
        assert str(exc.value).startswith("faq.html:1:1 ")
