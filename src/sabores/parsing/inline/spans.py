"""Single-token and code span recognizers."""

from __future__ import annotations

from collections.abc import Iterable

from sabores.nodes import SyntaxNode
from sabores.parsing.inline.chain import Claim, InlineContext
from sabores.tokens import ElementKind, ElementType, GfmElementTypes, GfmTokenTypes, TokenType


class AutolinkParser:
    """Angle-bracket autolinks: ``<https://x>`` and ``<a@b.c>`` → AUTOLINK.

    Args:
        kinds: Token kinds to wrap. Defaults to both URI and email autolinks.
    """

    __slots__ = ("claims",)

    def __init__(self, kinds: Iterable[ElementKind] = (TokenType.AUTOLINK, TokenType.EMAIL_AUTOLINK)) -> None:
        self.claims = frozenset(kinds)

    def parse(self, ctx: InlineContext, pos: int, end: int) -> Claim | None:
        token = ctx.tokens[pos]
        leaf = SyntaxNode.leaf(token)
        return Claim(SyntaxNode(ElementType.AUTOLINK, token.start, token.end, (leaf,)), pos + 1)


class GfmAutolinkParser:
    """Bare ``www.`` and ``scheme://`` links → GFM_AUTOLINK."""

    __slots__ = ()

    claims = frozenset({GfmTokenTypes.GFM_AUTOLINK})

    def parse(self, ctx: InlineContext, pos: int, end: int) -> Claim | None:
        token = ctx.tokens[pos]
        leaf = SyntaxNode.leaf(token)
        return Claim(SyntaxNode(GfmElementTypes.GFM_AUTOLINK, token.start, token.end, (leaf,)), pos + 1)


class BacktickParser:
    """Code spans.

    CommonMark 6.1: a backtick run opens a code span that closes at the next
    run of exactly the same length. Without a closer the run is literal text.
    """

    __slots__ = ()

    claims = frozenset({TokenType.BACKTICK})

    def parse(self, ctx: InlineContext, pos: int, end: int) -> Claim | None:
        tokens = ctx.tokens
        width = len(tokens[pos])
        for close in range(pos + 1, end):
            token = tokens[close]
            if token.type == TokenType.BACKTICK and len(token) == width:
                node = SyntaxNode(
                    ElementType.CODE_SPAN,
                    tokens[pos].start,
                    token.end,
                    ctx.leaves(pos, close + 1),
                )
                return Claim(node, close + 1)
        return None
