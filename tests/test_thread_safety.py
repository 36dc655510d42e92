"""Thread safety tests for shared renderers and partial registries.

Templates, partials and input data are read-only during rendering, so a
single TemplateRenderer can be shared by worker threads.
"""

from concurrent.futures import ThreadPoolExecutor

from plantilla import PartialRegistryBuilder, TemplateRenderer, render

TEMPLATE = (
    "{{> head}}"
    "{{#each items}}{{_index}}={{label}}{{#if _last}}.{{else}},{{/if}}{{/each}}"
    "{{json meta}}"
)


def _context(n: int) -> dict:
    return {
        "title": f"Page {n}",
        "items": [{"label": f"item{n}-{i}"} for i in range(n % 5 + 1)],
        "meta": {"n": n},
    }


class TestSharedRenderer:
    def test_concurrent_renders_match_sequential(self) -> None:
        partials = PartialRegistryBuilder().register("head", "<h1>{{title}}</h1>").build()
        renderer = TemplateRenderer(partials)
        expected = [renderer.render(TEMPLATE, _context(n)) for n in range(50)]

        with ThreadPoolExecutor(max_workers=8) as ex:
            actual = list(ex.map(lambda n: renderer.render(TEMPLATE, _context(n)), range(50)))

        assert actual == expected

    def test_input_data_is_not_mutated(self) -> None:
        contexts = [_context(n) for n in range(20)]
        snapshot = [repr(c) for c in contexts]

        with ThreadPoolExecutor(max_workers=4) as ex:
            list(ex.map(lambda c: render(TEMPLATE, c, {"head": "{{title}}"}), contexts))

        assert [repr(c) for c in contexts] == snapshot
