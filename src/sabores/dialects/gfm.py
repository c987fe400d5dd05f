"""GitHub-flavored dialect.

Composed over CommonMark. The chain is declared in full: bare-URL autolinks
rank below explicit links, so a URL used as link text stays part of the link,
and strikethrough ranks above emphasis.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sabores.dialects import get_dialect, register_dialect
from sabores.dialects.descriptor import DialectDescriptor, compose
from sabores.lexer import GfmInlineLexer
from sabores.parsing.inline import (
    AutolinkParser,
    BacktickParser,
    EmphStrongParser,
    GfmAutolinkParser,
    ImageParser,
    InlineLinkParser,
    ReferenceLinkParser,
    StrikeThroughParser,
)
from sabores.renderers.providers import GfmAutolinkGeneratingProvider, SimpleInlineTagProvider
from sabores.tokens import GfmElementTypes, TokenType

if TYPE_CHECKING:
    from sabores.nodes import NodeRef
    from sabores.parsing.inline import SequentialParser
    from sabores.renderers.html import HtmlGeneratingVisitor


class StrikethroughGeneratingProvider(SimpleInlineTagProvider):
    """``~~text~~`` → ``<span class="user-del">text</span>``."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("span", 2, -2)

    def open_tag(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        visitor.consume_tag_open(node, self.tag_name, 'class="user-del"')


def gfm_parsers() -> list[SequentialParser]:
    return [
        AutolinkParser((TokenType.AUTOLINK, TokenType.EMAIL_AUTOLINK)),
        BacktickParser(),
        ImageParser(),
        InlineLinkParser(),
        ReferenceLinkParser(),
        GfmAutolinkParser(),
        StrikeThroughParser(),
        EmphStrongParser(),
    ]


@register_dialect("gfm")
def build_gfm() -> DialectDescriptor:
    return compose(
        get_dialect("commonmark"),
        name="gfm",
        parsers=gfm_parsers(),
        providers={
            GfmElementTypes.STRIKETHROUGH: StrikethroughGeneratingProvider(),
            GfmElementTypes.GFM_AUTOLINK: GfmAutolinkGeneratingProvider(),
        },
        lexer=GfmInlineLexer,
    )
