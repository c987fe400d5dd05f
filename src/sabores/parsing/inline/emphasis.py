"""Emphasis, strong emphasis and strikethrough recognizers.

Delimiter runs are matched left to right: an opener claims the first later
run of the same character that can close it, stepping over pairs that open
and close in between. This is simpler than the CommonMark delimiter stack and
gives the same result for ordinary input; unusual nestings degrade to literal
delimiters, never to an error.

Flanking rules follow CommonMark 0.31.2 section 6.2.
"""

from __future__ import annotations

from sabores.nodes import SyntaxNode
from sabores.parsing.charsets import is_unicode_punctuation, is_unicode_whitespace
from sabores.parsing.inline.chain import Claim, InlineContext
from sabores.tokens import ElementKind, ElementType, GfmElementTypes, GfmTokenTypes, TokenType


def _is_left_flanking(before: str, after: str) -> bool:
    """Left-flanking: not followed by whitespace, and either not followed by
    punctuation or preceded by whitespace or punctuation."""
    if is_unicode_whitespace(after):
        return False
    if not is_unicode_punctuation(after):
        return True
    return is_unicode_whitespace(before) or is_unicode_punctuation(before)


def _is_right_flanking(before: str, after: str) -> bool:
    """Right-flanking: mirror image of left-flanking."""
    if is_unicode_whitespace(before):
        return False
    if not is_unicode_punctuation(before):
        return True
    return is_unicode_whitespace(after) or is_unicode_punctuation(after)


def _can_open(delim: str, before: str, after: str) -> bool:
    left = _is_left_flanking(before, after)
    if delim == "*":
        return left
    # Underscore may not open intraword
    return left and (not _is_right_flanking(before, after) or is_unicode_punctuation(before))


def _can_close(delim: str, before: str, after: str) -> bool:
    right = _is_right_flanking(before, after)
    if delim == "*":
        return right
    return right and (not _is_left_flanking(before, after) or is_unicode_punctuation(after))


def _run_end(ctx: InlineContext, pos: int, end: int, kind: ElementKind, text: str) -> int:
    """Index just past the run of identical delimiter tokens starting at pos."""
    tokens = ctx.tokens
    while pos < end and tokens[pos].type == kind and tokens.text_at(pos) == text:
        pos += 1
    return pos


def _skip_code_span(ctx: InlineContext, pos: int, end: int) -> int:
    """Index past a code span opening at pos, or pos + 1 if it never closes."""
    tokens = ctx.tokens
    width = len(tokens[pos])
    for close in range(pos + 1, end):
        if tokens[close].type == TokenType.BACKTICK and len(tokens[close]) == width:
            return close + 1
    return pos + 1


class EmphStrongParser:
    """``*``/``_`` delimiter runs → EMPH or STRONG.

    Two or more delimiters on both sides make STRONG, otherwise EMPH. Three
    on both sides make EMPH wrapping STRONG. Leftover delimiters stay text:
    a claim may start after the cursor, leaving extra opening delimiters to
    the chain.
    """

    __slots__ = ()

    claims = frozenset({TokenType.EMPH})

    def parse(self, ctx: InlineContext, pos: int, end: int) -> Claim | None:
        tokens = ctx.tokens
        delim = tokens.text_at(pos)
        open_end = _run_end(ctx, pos, end, TokenType.EMPH, delim)
        before = ctx.char_before(tokens.offset_of(pos))
        after = ctx.char_at(tokens.offset_of(open_end))
        if not _can_open(delim, before, after):
            return None
        closer = self._find_closer(ctx, delim, open_end, end)
        if closer is None:
            return None
        return self._claim(ctx, pos, open_end, *closer)

    def _find_closer(self, ctx: InlineContext, delim: str, open_end: int, end: int) -> tuple[int, int] | None:
        """First run after open_end that can close; matched inner pairs are skipped.

        A single forward scan: ``depth`` counts inner openers still waiting
        for a closer, and each closing run pairs with the innermost one.
        """
        tokens = ctx.tokens
        depth = 0
        close = open_end
        while close < end:
            kind = tokens.kind_at(close)
            if kind == TokenType.BACKTICK:
                close = _skip_code_span(ctx, close, end)
                continue
            if kind != TokenType.EMPH or tokens.text_at(close) != delim:
                close += 1
                continue
            close_end = _run_end(ctx, close, end, TokenType.EMPH, delim)
            before = ctx.char_before(tokens.offset_of(close))
            after = ctx.char_at(tokens.offset_of(close_end))
            if _can_close(delim, before, after):
                if depth == 0:
                    return close, close_end
                depth -= 1
            elif _can_open(delim, before, after):
                depth += 1
            close = close_end
        return None

    def _claim(self, ctx: InlineContext, pos: int, open_end: int, close: int, close_end: int) -> Claim:
        width = min(open_end - pos, close_end - close, 3)
        first = open_end - width
        content = ctx.parse(open_end, close)
        tokens = ctx.tokens

        if width == 3:
            strong = SyntaxNode(
                ElementType.STRONG,
                tokens.offset_of(first + 1),
                tokens.end_offset_of(close + 1),
                (*ctx.leaves(first + 1, open_end), *content, *ctx.leaves(close, close + 2)),
            )
            children = (*ctx.leaves(first, first + 1), strong, *ctx.leaves(close + 2, close + 3))
            kind = ElementType.EMPH
        else:
            children = (*ctx.leaves(first, open_end), *content, *ctx.leaves(close, close + width))
            kind = ElementType.STRONG if width == 2 else ElementType.EMPH

        node = SyntaxNode(kind, tokens.offset_of(first), tokens.end_offset_of(close + width - 1), children)
        return Claim(node, close + width)


class StrikeThroughParser:
    """GFM ``~~text~~`` → STRIKETHROUGH.

    Exactly two tildes on each side, left-flanking opener, right-flanking
    closer. The node keeps both tilde leaves on each end so renderers can
    slice them off by position.
    """

    __slots__ = ()

    claims = frozenset({GfmTokenTypes.TILDE})

    def parse(self, ctx: InlineContext, pos: int, end: int) -> Claim | None:
        tokens = ctx.tokens
        tilde = GfmTokenTypes.TILDE
        # Exactly two: neither the tail of a longer run nor followed by a third
        if tokens.kind_at(pos - 1) == tilde or _run_end(ctx, pos, end, tilde, "~") != pos + 2:
            return None
        if not _is_left_flanking(ctx.char_before(tokens.offset_of(pos)), ctx.char_at(tokens.offset_of(pos + 2))):
            return None

        close = pos + 2
        while close < end:
            kind = tokens.kind_at(close)
            if kind == TokenType.BACKTICK:
                close = _skip_code_span(ctx, close, end)
                continue
            if kind != tilde:
                close += 1
                continue
            close_end = _run_end(ctx, close, end, tilde, "~")
            before = ctx.char_before(tokens.offset_of(close))
            after = ctx.char_at(tokens.offset_of(close_end))
            if close_end - close == 2 and close > pos + 2 and _is_right_flanking(before, after):
                children = (
                    *ctx.leaves(pos, pos + 2),
                    *ctx.parse(pos + 2, close),
                    *ctx.leaves(close, close_end),
                )
                node = SyntaxNode(
                    GfmElementTypes.STRIKETHROUGH,
                    tokens.offset_of(pos),
                    tokens.end_offset_of(close_end - 1),
                    children,
                )
                return Claim(node, close_end)
            close = close_end
        return None
