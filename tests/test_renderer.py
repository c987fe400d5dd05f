"""Tests for HTML generation: dispatch rules and the stock providers."""

from __future__ import annotations

import pytest

from sabores import Markdown, parse
from sabores.dialects import get_dialect
from sabores.errors import RenderError
from sabores.renderers import (
    ASTRenderer,
    GeneratingProvider,
    HtmlGenerator,
    HtmlRenderer,
    ProviderRegistry,
)
from sabores.renderers.providers import SimpleInlineTagProvider
from sabores.tokens import ElementType


@pytest.fixture
def md() -> Markdown:
    return Markdown()


class TestDispatch:
    """Provider if registered; else leaves render escaped text, composites their children."""

    def test_empty_registry_renders_escaped_text(self) -> None:
        tree = parse("a & *b*")
        html = HtmlGenerator(tree.source, tree, ProviderRegistry()).generate_html()
        assert html == "a &amp; *b*"

    def test_single_override(self) -> None:
        tree = parse("*b*")
        registry = ProviderRegistry({ElementType.EMPH: SimpleInlineTagProvider("i", 1, -1)})
        assert HtmlGenerator(tree.source, tree, registry).generate_html() == "<i>b</i>"

    def test_tree_longer_than_source(self) -> None:
        tree = parse("some longer text")
        with pytest.raises(RenderError):
            HtmlGenerator("short", tree, ProviderRegistry())

    def test_provider_protocol(self) -> None:
        for _, provider in get_dialect("gfm").registry.items():
            assert isinstance(provider, GeneratingProvider)


class TestBlocks:
    def test_paragraphs(self, md: Markdown) -> None:
        assert md("a\n\nb") == "<p>a</p>\n<p>b</p>\n"

    @pytest.mark.parametrize("level", range(1, 7))
    def test_atx_heading_levels(self, md: Markdown, level: int) -> None:
        assert md("#" * level + " Title") == f"<h{level}>Title</h{level}>\n"

    def test_closing_sequence_dropped(self, md: Markdown) -> None:
        assert md("## Title ##") == "<h2>Title</h2>\n"

    def test_empty_heading(self, md: Markdown) -> None:
        assert md("#") == "<h1></h1>\n"

    def test_heading_with_inline_markup(self, md: Markdown) -> None:
        assert md("# Hello *World*") == "<h1>Hello <em>World</em></h1>\n"

    def test_heading_then_paragraph(self, md: Markdown) -> None:
        assert md("# T\ntext") == "<h1>T</h1>\n<p>text</p>\n"

    def test_definition_renders_nothing(self, md: Markdown) -> None:
        assert md("[a]: /u") == ""

    def test_empty_document(self, md: Markdown) -> None:
        assert md("") == ""
        assert md("\n\n  \n") == ""


class TestInline:
    def test_emphasis(self, md: Markdown) -> None:
        assert md("*a* **b** ***c***") == (
            "<p><em>a</em> <strong>b</strong> <em><strong>c</strong></em></p>\n"
        )

    def test_code_span(self, md: Markdown) -> None:
        assert md("`a<b`") == "<p><code>a&lt;b</code></p>\n"

    def test_code_span_strips_one_space(self, md: Markdown) -> None:
        assert md("`` `x` ``") == "<p><code>`x`</code></p>\n"

    def test_soft_break(self, md: Markdown) -> None:
        assert md("a\nb") == "<p>a\nb</p>\n"

    def test_hard_break(self, md: Markdown) -> None:
        assert md("a  \nb") == "<p>a<br />\nb</p>\n"

    def test_text_escaped_once(self, md: Markdown) -> None:
        assert md("a & b < c &amp; d") == "<p>a &amp; b &lt; c &amp; d</p>\n"

    def test_entity_decoded(self, md: Markdown) -> None:
        assert md("&copy; 2024") == "<p>© 2024</p>\n"

    def test_backslash_escape(self, md: Markdown) -> None:
        assert md("\\*not emphasis\\*") == "<p>*not emphasis*</p>\n"

    def test_raw_html_passes_through(self, md: Markdown) -> None:
        assert md("a <span>b</span>") == "<p>a <span>b</span></p>\n"

    def test_strikethrough(self, md: Markdown) -> None:
        assert md("~~gone~~") == '<p><span class="user-del">gone</span></p>\n'


class TestLinks:
    def test_inline_link(self, md: Markdown) -> None:
        assert md('[a](/u "t")') == '<p><a href="/u" title="t">a</a></p>\n'

    def test_destination_normalized(self, md: Markdown) -> None:
        assert md("[a](<b c>)") == '<p><a href="b%20c">a</a></p>\n'

    def test_empty_destination(self, md: Markdown) -> None:
        assert md("[a]()") == '<p><a href="">a</a></p>\n'

    def test_reference_link(self, md: Markdown) -> None:
        assert md('[foo]\n\n[foo]: /url "title"') == (
            '<p><a href="/url" title="title">foo</a></p>\n'
        )

    def test_full_reference(self, md: Markdown) -> None:
        assert md("[text][ref]\n\n[ref]: /u") == '<p><a href="/u">text</a></p>\n'

    def test_definition_before_use(self, md: Markdown) -> None:
        assert md("[ref]: /u\n\n[ref]") == '<p><a href="/u">ref</a></p>\n'

    def test_undefined_reference(self, md: Markdown) -> None:
        assert md("[nope]") == "<p>[nope]</p>\n"

    def test_autolink(self, md: Markdown) -> None:
        assert md("<https://x.org>") == '<p><a href="https://x.org">https://x.org</a></p>\n'

    def test_email_autolink(self, md: Markdown) -> None:
        assert md("<foo@bar.com>") == '<p><a href="mailto:foo@bar.com">foo@bar.com</a></p>\n'

    def test_base_uri(self) -> None:
        md = Markdown(base_uri="https://x.org/docs/")
        assert md("[a](page.html)") == '<p><a href="https://x.org/docs/page.html">a</a></p>\n'

    def test_base_uri_keeps_absolute_and_fragments(self) -> None:
        md = Markdown(base_uri="https://x.org/docs/")
        assert 'href="https://other.org/"' in md("[a](https://other.org/)")
        assert 'href="#top"' in md("[a](#top)")


class TestImages:
    def test_inline_image(self, md: Markdown) -> None:
        assert md("![alt *x*](/i.png)") == '<p><img src="/i.png" alt="alt x" /></p>\n'

    def test_image_with_title(self, md: Markdown) -> None:
        assert md('![a](/i.png "T")') == '<p><img src="/i.png" alt="a" title="T" /></p>\n'

    def test_reference_image(self, md: Markdown) -> None:
        assert md("![logo]\n\n[logo]: /l.png") == '<p><img src="/l.png" alt="logo" /></p>\n'

    def test_image_inside_link(self, md: Markdown) -> None:
        assert md("[![a](/i.png)](/u)") == '<p><a href="/u"><img src="/i.png" alt="a" /></a></p>\n'


class TestTextTransformer:
    def test_applies_to_text_only(self) -> None:
        md = Markdown(text_transformer=str.upper)
        assert md("hi *there* `code`") == "<p>HI <em>THERE</em> <code>code</code></p>\n"


class TestHtmlRenderer:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(HtmlRenderer(), ASTRenderer)

    def test_default_dialect_is_gfm(self) -> None:
        assert HtmlRenderer().dialect is get_dialect("gfm")

    def test_render_with_other_dialect(self) -> None:
        tree = parse("*a*", dialect="commonmark")
        assert HtmlRenderer(get_dialect("commonmark")).render(tree) == "<p><em>a</em></p>\n"
