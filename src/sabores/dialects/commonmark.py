"""CommonMark base dialect."""

from __future__ import annotations

from sabores.dialects import register_dialect
from sabores.dialects.descriptor import DialectDescriptor, compose
from sabores.lexer import InlineLexer
from sabores.parsing.blocks import BlockParser
from sabores.parsing.inline import (
    AutolinkParser,
    BacktickParser,
    EmphStrongParser,
    ImageParser,
    InlineLinkParser,
    ReferenceLinkParser,
    SequentialParser,
)
from sabores.renderers.providers import (
    AutolinkGeneratingProvider,
    CodeSpanGeneratingProvider,
    DocumentGeneratingProvider,
    EolProvider,
    GeneratingProvider,
    HardBreakProvider,
    HtmlTagProvider,
    ImageGeneratingProvider,
    InlineLinkGeneratingProvider,
    ReferenceLinksGeneratingProvider,
    SimpleInlineTagProvider,
    SimpleTagProvider,
    SkipProvider,
    TransparentInlineHolderProvider,
    TrimmingInlineHolderProvider,
)
from sabores.tokens import ATX_LEVELS, ElementKind, ElementType, TokenType


def commonmark_parsers() -> list[SequentialParser]:
    """The CommonMark recognizer chain, highest priority first."""
    return [
        AutolinkParser((TokenType.AUTOLINK, TokenType.EMAIL_AUTOLINK)),
        BacktickParser(),
        ImageParser(),
        InlineLinkParser(),
        ReferenceLinkParser(),
        EmphStrongParser(),
    ]


def commonmark_providers() -> dict[ElementKind, GeneratingProvider]:
    skip = SkipProvider()
    reference = ReferenceLinksGeneratingProvider()
    label = TransparentInlineHolderProvider(1, -1)
    providers = {
        ElementType.DOCUMENT: DocumentGeneratingProvider(),
        ElementType.PARAGRAPH: SimpleTagProvider("p"),
        ElementType.ATX_CONTENT: TrimmingInlineHolderProvider(),
        ElementType.LINK_DEFINITION: skip,
        ElementType.CODE_SPAN: CodeSpanGeneratingProvider(),
        ElementType.EMPH: SimpleInlineTagProvider("em", 1, -1),
        ElementType.STRONG: SimpleInlineTagProvider("strong", 2, -2),
        ElementType.AUTOLINK: AutolinkGeneratingProvider(),
        ElementType.IMAGE: ImageGeneratingProvider(),
        ElementType.INLINE_LINK: InlineLinkGeneratingProvider(),
        ElementType.FULL_REFERENCE_LINK: reference,
        ElementType.SHORT_REFERENCE_LINK: reference,
        ElementType.LINK_TEXT: label,
        ElementType.LINK_LABEL: label,
        TokenType.ATX_HEADER: skip,
        TokenType.HTML_TAG: HtmlTagProvider(),
        TokenType.HARD_LINE_BREAK: HardBreakProvider(),
        TokenType.EOL: EolProvider(),
    }
    for level, kind in enumerate(ATX_LEVELS, start=1):
        providers[kind] = SimpleTagProvider(f"h{level}")
    return providers


@register_dialect("commonmark")
def build_commonmark() -> DialectDescriptor:
    return compose(
        None,
        name="commonmark",
        parsers=commonmark_parsers(),
        providers=commonmark_providers(),
        lexer=InlineLexer,
        block_parser=BlockParser,
    )
