"""Concurrent parsing and rendering must match sequential results."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor

import pytest

from sabores import Markdown, dialects
from sabores.dialects import BUILTIN_DIALECTS, DialectDescriptor, compose, get_dialect, register_dialect

DOCUMENTS = [
    "# Title\n\nVisit www.example.com.",
    "*a* **b** ~~c~~ `d`",
    "[ref] and [text][ref]\n\n[ref]: /u 'T'",
    "![img](/i.png) <https://x.org> a@b.c",
    "[www.x.com](http://y) https://a.org/?q=1&r=2",
    "line one  \nline two\nline three",
]


@pytest.fixture
def race_dialect() -> Iterator[str]:
    name = "test-race"
    yield name
    BUILTIN_DIALECTS.pop(name, None)
    dialects._built.pop(name, None)


class TestConcurrentRendering:
    def test_shared_instance(self) -> None:
        md = Markdown()
        expected = [md(doc) for doc in DOCUMENTS]
        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(md, DOCUMENTS * 20))
        assert results == expected * 20

    def test_instances_with_different_dialects(self) -> None:
        gfm = Markdown("gfm")
        commonmark = Markdown("commonmark")
        expected = [(gfm(doc), commonmark(doc)) for doc in DOCUMENTS]

        def render_both(doc: str) -> tuple[str, str]:
            return gfm(doc), commonmark(doc)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(render_both, DOCUMENTS * 20))
        assert results == expected * 20

    def test_base_uri_per_instance(self) -> None:
        instances = [Markdown(base_uri=f"https://site{i}.org/") for i in range(4)]

        def render(i: int) -> str:
            return instances[i % 4]("[a](page)")

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(render, range(40)))
        for i, html in enumerate(results):
            assert f'href="https://site{i % 4}.org/page"' in html


class TestDialectBuilding:
    def test_factory_runs_once(self, race_dialect: str) -> None:
        calls = 0
        barrier = threading.Barrier(8)

        @register_dialect(race_dialect)
        def build() -> DialectDescriptor:
            nonlocal calls
            calls += 1
            return compose(get_dialect("gfm"), name=race_dialect)

        def fetch(_: int) -> DialectDescriptor:
            barrier.wait()
            return get_dialect(race_dialect)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(fetch, range(8)))
        assert calls == 1
        assert all(result is results[0] for result in results)
