"""Link and image recognizers.

Handles inline links, reference links and images.

The bracket and destination scanners work on character offsets bounded by
the end of the inline range, then the recognizers map offsets back to token
indices. A construct whose edges fall inside a token (for example a ``]``
swallowed by a raw HTML tag) is not a link and the recognizer declines.

CommonMark 0.31.2:
- Link destinations can be angle-bracket delimited or raw
- Angle-bracket destinations: no newlines, can have spaces
- Raw destinations: no spaces, no control chars, balanced parens
- Reference links need a matching definition
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from sabores.nodes import SyntaxNode
from sabores.parsing.inline.chain import Claim, InlineContext
from sabores.tokens import ElementKind, ElementType, TokenType
from sabores.utils.text import ESCAPABLE_CHARS

# CommonMark 4.7: a link label is at most 999 characters
_MAX_LABEL_LENGTH = 999

_UNESCAPED_BRACKET = re.compile(r"(?<!\\)[\[\]]")


@dataclass(frozen=True, slots=True)
class LinkTail:
    """Offsets of a parsed ``(destination "title")`` part.

    Ranges include their delimiters (``<>`` and quotes), which the
    normalizers strip at render time.
    """

    open: int
    destination: tuple[int, int]
    title: tuple[int, int] | None
    end: int


def _skip_whitespace(text: str, pos: int, end: int) -> int:
    while pos < end and text[pos] in " \t\n\r":
        pos += 1
    return pos


def _parse_link_destination(text: str, pos: int, end: int) -> tuple[int, int] | None:
    """Parse a link destination starting at pos.

    CommonMark 6.5: either ``<...>`` (no newlines or unescaped ``<``) or a
    raw run of non-space characters with balanced parentheses.

    Returns:
        (dest_end, next_pos) or None if invalid. The destination spans
        ``[pos, dest_end)``.
    """
    if pos >= end:
        return None

    if text[pos] == "<":
        p = pos + 1
        while p < end:
            char = text[p]
            if char == ">":
                return p + 1, p + 1
            if char in "\n\r<":
                return None
            if char == "\\" and p + 1 < end:
                p += 2
                continue
            p += 1
        return None

    p = pos
    paren_depth = 0
    while p < end:
        char = text[p]
        if char in " \t\n\r" or ord(char) < 0x20:
            break
        if char == "(":
            paren_depth += 1
        elif char == ")":
            if paren_depth == 0:
                break
            paren_depth -= 1
        elif char == "\\" and p + 1 < end and text[p + 1] in ESCAPABLE_CHARS:
            p += 2
            continue
        p += 1

    if paren_depth:
        return None
    return p, p


def _parse_link_title(text: str, pos: int, end: int) -> tuple[int, int] | None:
    """Parse a title delimited by ``"``, ``'`` or ``()`` starting at pos.

    Returns:
        (title_end, next_pos) or None. The title spans ``[pos, title_end)``.
    """
    if pos >= end:
        return None
    closer = {'"': '"', "'": "'", "(": ")"}.get(text[pos])
    if closer is None:
        return None
    p = pos + 1
    while p < end:
        char = text[p]
        if char == closer:
            return p + 1, p + 1
        if char == "\\" and p + 1 < end:
            p += 2
            continue
        if closer == ")" and char == "(":
            return None
        p += 1
    return None


def _parse_inline_link(text: str, pos: int, end: int) -> LinkTail | None:
    """Parse ``(url)``, ``(url "title")`` or ``(<url> 'title')`` at pos."""
    if pos >= end or text[pos] != "(":
        return None

    p = _skip_whitespace(text, pos + 1, end)
    if p < end and text[p] == ")":
        return LinkTail(pos, (p, p), None, p + 1)

    dest_start = p
    dest = _parse_link_destination(text, p, end)
    if dest is None:
        return None
    dest_end, p = dest
    destination = (dest_start, dest_end)

    after_dest = p
    p = _skip_whitespace(text, p, end)
    if p >= end:
        return None
    if text[p] == ")":
        return LinkTail(pos, destination, None, p + 1)

    # A title must be separated from the destination by whitespace
    if p == after_dest:
        return None
    title_start = p
    title = _parse_link_title(text, p, end)
    if title is None:
        return None
    title_end, p = title

    p = _skip_whitespace(text, p, end)
    if p >= end or text[p] != ")":
        return None
    return LinkTail(pos, destination, (title_start, title_end), p + 1)


def _find_closing_bracket(text: str, start: int, end: int) -> int:
    """Find the ``]`` matching an opening bracket, skipping code spans.

    CommonMark: code spans bind tighter than link text, backslash escapes
    protect brackets, and nested ``[ ]`` pairs are allowed.

    Args:
        text: Full text to search
        start: Position after the opening ``[``
        end: Search bound

    Returns:
        Position of the closing ``]`` or -1 if not found

    """
    pos = start
    depth = 0
    while pos < end:
        char = text[pos]

        if char == "`":
            run_end = pos
            while run_end < end and text[run_end] == "`":
                run_end += 1
            run = text[pos:run_end]
            close = text.find(run, run_end, end)
            # The closer must be a run of exactly the same length
            while close != -1 and close + len(run) < end and text[close + len(run)] == "`":
                skip = close
                while skip < end and text[skip] == "`":
                    skip += 1
                close = text.find(run, skip, end)
            pos = close + len(run) if close != -1 else run_end
            continue

        if char == "[":
            depth += 1
        elif char == "]":
            if depth == 0:
                return pos
            depth -= 1
        elif char == "\\":
            pos += 2
            continue
        pos += 1

    return -1


def _find_label_end(text: str, start: int, end: int) -> int:
    """Find the ``]`` closing a link label; labels cannot nest brackets."""
    pos = start
    while pos < end:
        char = text[pos]
        if char == "]":
            return pos
        if char == "[":
            return -1
        if char == "\\":
            pos += 2
            continue
        pos += 1
    return -1


def _valid_label(label: str) -> bool:
    return (
        bool(label.strip())
        and len(label) <= _MAX_LABEL_LENGTH
        and _UNESCAPED_BRACKET.search(label) is None
    )


@dataclass(frozen=True, slots=True)
class _Brackets:
    """Token indices of a ``[ ... ]`` pair."""

    open: int
    close: int


def _match_brackets(ctx: InlineContext, pos: int, end: int) -> _Brackets | None:
    if ctx.tokens.kind_at(pos) != TokenType.LBRACKET:
        return None
    source = ctx.source
    open_offset = ctx.tokens.offset_of(pos)
    close_offset = _find_closing_bracket(source, open_offset + 1, ctx.tokens.offset_of(end))
    if close_offset == -1:
        return None
    close = ctx.index_at(close_offset)
    if close is None or ctx.tokens.kind_at(close) != TokenType.RBRACKET:
        return None
    return _Brackets(pos, close)


def _bracketed(
    ctx: InlineContext, kind: ElementKind, brackets: _Brackets, *, parse_content: bool
) -> SyntaxNode:
    """LINK_TEXT or LINK_LABEL node: ``[`` leaf, content, ``]`` leaf."""
    tokens = ctx.tokens
    if parse_content:
        content = ctx.inside_link().parse(brackets.open + 1, brackets.close)
    else:
        content = ctx.leaves(brackets.open + 1, brackets.close)
    return SyntaxNode(
        kind,
        tokens.offset_of(brackets.open),
        tokens.end_offset_of(brackets.close),
        (SyntaxNode.leaf(tokens[brackets.open]), *content, SyntaxNode.leaf(tokens[brackets.close])),
    )


def _tail_children(ctx: InlineContext, tail: LinkTail) -> tuple[SyntaxNode, ...] | None:
    """Children for the ``( ... )`` part, or None if it splits a token."""
    parts: list[tuple[ElementKind, tuple[int, int]]] = [(ElementType.LINK_DESTINATION, tail.destination)]
    if tail.title is not None:
        parts.append((ElementType.LINK_TITLE, tail.title))

    i = ctx.index_at(tail.open)
    close = ctx.index_at(tail.end)
    if i is None or close is None:
        return None

    children: list[SyntaxNode] = []
    for kind, (start, stop) in parts:
        if start == stop:
            continue
        first = ctx.index_at(start)
        last = ctx.index_at(stop)
        if first is None or last is None:
            return None
        children.extend(ctx.leaves(i, first))
        children.append(SyntaxNode(kind, start, stop, ctx.leaves(first, last)))
        i = last
    children.extend(ctx.leaves(i, close))
    return tuple(children)


def _try_inline_link(ctx: InlineContext, pos: int, end: int) -> Claim | None:
    brackets = _match_brackets(ctx, pos, end)
    if brackets is None:
        return None
    tokens = ctx.tokens
    paren = brackets.close + 1
    if tokens.kind_at(paren) != TokenType.LPAREN or paren >= end:
        return None

    tail = _parse_inline_link(ctx.source, tokens.offset_of(paren), tokens.offset_of(end))
    if tail is None:
        return None
    tail_children = _tail_children(ctx, tail)
    if tail_children is None:
        return None

    next_index = ctx.index_at(tail.end)
    if next_index is None:
        return None

    link_text = _bracketed(ctx, ElementType.LINK_TEXT, brackets, parse_content=True)
    node = SyntaxNode(ElementType.INLINE_LINK, link_text.start, tail.end, (link_text, *tail_children))
    return Claim(node, next_index)


def _try_reference_link(ctx: InlineContext, pos: int, end: int) -> Claim | None:
    brackets = _match_brackets(ctx, pos, end)
    if brackets is None:
        return None
    tokens = ctx.tokens
    source = ctx.source
    text_start = tokens.end_offset_of(brackets.open)
    text_end = tokens.offset_of(brackets.close)

    following = brackets.close + 1
    if following < end and tokens.kind_at(following) == TokenType.LBRACKET:
        # Full [text][label] or collapsed [label][]
        label_open_offset = tokens.offset_of(following)
        label_close_offset = _find_label_end(source, label_open_offset + 1, tokens.offset_of(end))
        if label_close_offset == -1:
            return None
        label_close = ctx.index_at(label_close_offset)
        if label_close is None or tokens.kind_at(label_close) != TokenType.RBRACKET:
            return None
        label = _Brackets(following, label_close)

        if label_close_offset == label_open_offset + 1:
            # Collapsed: the link text is the label
            if not _valid_label(source[text_start:text_end]) or not ctx.is_defined(source[text_start:text_end]):
                return None
            node = SyntaxNode(
                ElementType.SHORT_REFERENCE_LINK,
                tokens.offset_of(brackets.open),
                tokens.end_offset_of(label_close),
                (
                    _bracketed(ctx, ElementType.LINK_LABEL, brackets, parse_content=True),
                    *ctx.leaves(following, label_close + 1),
                ),
            )
            return Claim(node, label_close + 1)

        label_text = source[label_open_offset + 1 : label_close_offset]
        if not _valid_label(label_text) or not ctx.is_defined(label_text):
            return None
        link_text = _bracketed(ctx, ElementType.LINK_TEXT, brackets, parse_content=True)
        link_label = _bracketed(ctx, ElementType.LINK_LABEL, label, parse_content=False)
        node = SyntaxNode(
            ElementType.FULL_REFERENCE_LINK, link_text.start, link_label.end, (link_text, link_label)
        )
        return Claim(node, label_close + 1)

    # Shortcut [label]
    label_text = source[text_start:text_end]
    if not _valid_label(label_text) or not ctx.is_defined(label_text):
        return None
    link_label = _bracketed(ctx, ElementType.LINK_LABEL, brackets, parse_content=True)
    node = SyntaxNode(ElementType.SHORT_REFERENCE_LINK, link_label.start, link_label.end, (link_label,))
    return Claim(node, brackets.close + 1)


class InlineLinkParser:
    """``[text](destination "title")`` → INLINE_LINK.

    Declines inside the text of another link so anchors never nest.
    """

    __slots__ = ()

    claims = frozenset({TokenType.LBRACKET})

    def parse(self, ctx: InlineContext, pos: int, end: int) -> Claim | None:
        if ctx.in_link:
            return None
        return _try_inline_link(ctx, pos, end)


class ReferenceLinkParser:
    """Reference links whose label has a definition.

    ``[text][label]`` → FULL_REFERENCE_LINK (LINK_TEXT, LINK_LABEL)
    ``[label][]`` and ``[label]`` → SHORT_REFERENCE_LINK (LINK_LABEL)
    """

    __slots__ = ()

    claims = frozenset({TokenType.LBRACKET})

    def parse(self, ctx: InlineContext, pos: int, end: int) -> Claim | None:
        if ctx.in_link:
            return None
        return _try_reference_link(ctx, pos, end)


class ImageParser:
    """``!`` followed by an inline or reference link → IMAGE.

    The IMAGE node holds the ``!`` leaf and the link node. Images are
    recognized inside link text too.
    """

    __slots__ = ()

    claims = frozenset({TokenType.EXCLAMATION_MARK})

    def parse(self, ctx: InlineContext, pos: int, end: int) -> Claim | None:
        if ctx.tokens.kind_at(pos + 1) != TokenType.LBRACKET or pos + 1 >= end:
            return None
        link = _try_inline_link(ctx, pos + 1, end) or _try_reference_link(ctx, pos + 1, end)
        if link is None:
            return None
        bang = SyntaxNode.leaf(ctx.tokens[pos])
        node = SyntaxNode(ElementType.IMAGE, bang.start, link.node.end, (bang, link.node))
        return Claim(node, link.next)
