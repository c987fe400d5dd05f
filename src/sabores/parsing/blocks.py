"""Block structure: paragraphs, ATX headings and link reference definitions.

A deliberately small block parser. It scans the source one line at a time
(find the line end, classify the line, commit) and never rewinds. Lists,
quotes, code blocks and the rest of CommonMark's block grammar are not
recognized; their lines read as paragraph text.

Each Block records its range plus the inline content range that the
recognizer chain fills in later, so block parsing and inline parsing stay
independent passes.

"""

from __future__ import annotations

import re
from dataclasses import dataclass

from sabores.nodes import SyntaxNode
from sabores.tokens import ATX_LEVELS, ElementKind, ElementType, TokenSpan, TokenType

# CommonMark 4.7, restricted to a single line
_LINK_DEFINITION_RE = re.compile(
    r" {0,3}(?P<label>\[(?:[^\[\]\\]|\\.){1,999}\]):[ \t]*"
    r"(?P<dest><[^<>\n]*>|[^\s<][^\s]*)"
    r"(?:[ \t]+(?P<title>\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'|\((?:[^()\\]|\\.)*\)))?"
    r"[ \t\r]*"
)

_ATX_RE = re.compile(r" {0,3}(#{1,6})(?=[ \t\r]|$)")


@dataclass(frozen=True, slots=True)
class Block:
    """One block-level construct.

    Attributes:
        kind: PARAGRAPH, ATX_1..ATX_6 or LINK_DEFINITION
        start: Start offset of the block
        end: End offset of the block (trailing whitespace excluded)
        prefix: Children before the inline content (heading markers,
            definition parts)
        content: Inline content range, or None when the block has none
        suffix: Children after the inline content (closing heading markers)

    """

    kind: ElementKind
    start: int
    end: int
    prefix: tuple[SyntaxNode, ...] = ()
    content: tuple[int, int] | None = None
    suffix: tuple[SyntaxNode, ...] = ()

    def to_node(self, inline: tuple[SyntaxNode, ...] = ()) -> SyntaxNode:
        """Assemble the block node around parsed inline children."""
        if self.kind in ATX_LEVELS and self.content is not None:
            content = (SyntaxNode(ElementType.ATX_CONTENT, *self.content, inline),)
        else:
            content = inline
        return SyntaxNode(self.kind, self.start, self.end, (*self.prefix, *content, *self.suffix))


class BlockParser:
    """Split a document into blocks.

    Usage:
        >>> blocks = BlockParser("# Title\\n\\nSome *text*").parse()
        >>> [b.kind.name for b in blocks]
        ['ATX_1', 'PARAGRAPH']

    """

    __slots__ = ("_source",)

    def __init__(self, source: str) -> None:
        self._source = source

    def parse(self) -> tuple[Block, ...]:
        source = self._source
        source_len = len(source)
        blocks: list[Block] = []
        paragraph: tuple[int, int] | None = None
        pos = 0

        while pos < source_len:
            line_end = source.find("\n", pos)
            if line_end == -1:
                line_end = source_len
            line = source[pos:line_end]

            if not line.strip():
                paragraph = self._close_paragraph(blocks, paragraph)
            elif heading := self._try_atx_heading(pos, line_end):
                paragraph = self._close_paragraph(blocks, paragraph)
                blocks.append(heading)
            elif paragraph is None and (definition := self._try_link_definition(pos, line_end)):
                blocks.append(definition)
            elif paragraph is None:
                start = pos + len(line) - len(line.lstrip(" \t"))
                paragraph = (start, pos + len(line.rstrip(" \t\r")))
            else:
                paragraph = (paragraph[0], pos + len(line.rstrip(" \t\r")))

            pos = line_end + 1

        self._close_paragraph(blocks, paragraph)
        return tuple(blocks)

    @staticmethod
    def _close_paragraph(blocks: list[Block], paragraph: tuple[int, int] | None) -> None:
        if paragraph is not None:
            blocks.append(Block(ElementType.PARAGRAPH, *paragraph, content=paragraph))
        return None

    def _try_atx_heading(self, line_start: int, line_end: int) -> Block | None:
        """ATX heading: 1-6 ``#``, then space or end of line.

        A closing ``#`` sequence is dropped when preceded by whitespace.
        """
        source = self._source
        match = _ATX_RE.match(source, line_start, line_end)
        if match is None:
            return None
        level = len(match.group(1))
        marker_start, marker_end = match.span(1)
        kind = ATX_LEVELS[level - 1]
        prefix = (SyntaxNode.leaf(TokenSpan(TokenType.ATX_HEADER, marker_start, marker_end)),)

        content_start = marker_end
        while content_start < line_end and source[content_start] in " \t":
            content_start += 1
        content_end = line_end
        while content_end > content_start and source[content_end - 1] in " \t\r":
            content_end -= 1

        suffix: tuple[SyntaxNode, ...] = ()
        block_end = content_end
        closing_start = content_end
        while closing_start > content_start and source[closing_start - 1] == "#":
            closing_start -= 1
        if closing_start < content_end and (
            closing_start == content_start or source[closing_start - 1] in " \t"
        ):
            suffix = (SyntaxNode.leaf(TokenSpan(TokenType.ATX_HEADER, closing_start, content_end)),)
            content_end = closing_start
            while content_end > content_start and source[content_end - 1] in " \t":
                content_end -= 1

        if content_start >= content_end:
            return Block(kind, marker_start, max(block_end, marker_end), prefix, None, suffix)
        return Block(kind, marker_start, block_end, prefix, (content_start, content_end), suffix)

    def _try_link_definition(self, line_start: int, line_end: int) -> Block | None:
        """Single-line ``[label]: destination "title"`` definition."""
        match = _LINK_DEFINITION_RE.fullmatch(self._source, line_start, line_end)
        if match is None or not match.group("label")[1:-1].strip():
            return None
        parts = [
            SyntaxNode(ElementType.LINK_LABEL, *match.span("label")),
            SyntaxNode(ElementType.LINK_DESTINATION, *match.span("dest")),
        ]
        if match.group("title") is not None:
            parts.append(SyntaxNode(ElementType.LINK_TITLE, *match.span("title")))
        return Block(ElementType.LINK_DEFINITION, match.start("label"), parts[-1].end, tuple(parts))
