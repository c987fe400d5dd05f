"""Tests for the block splitter: paragraphs, ATX headings, link definitions."""

from __future__ import annotations

import pytest

from sabores.parsing.blocks import Block, BlockParser
from sabores.tokens import ElementType, TokenType


def kinds(source: str) -> list[str]:
    return [block.kind.name for block in BlockParser(source).parse()]


class TestParagraphs:
    def test_single_line(self) -> None:
        (block,) = BlockParser("hello").parse()
        assert block.kind == ElementType.PARAGRAPH
        assert (block.start, block.end) == (0, 5)
        assert block.content == (0, 5)

    def test_lines_join_until_blank(self) -> None:
        (first, second) = BlockParser("a\nb\n\nc").parse()
        assert first.content == (0, 3)
        assert second.content == (5, 6)

    def test_indent_and_trailing_space_stripped(self) -> None:
        (block,) = BlockParser("   indented\n  cont  ").parse()
        assert block.content == (3, 18)

    def test_blank_lines_produce_nothing(self) -> None:
        assert BlockParser("").parse() == ()
        assert BlockParser("\n  \n\t\n").parse() == ()


class TestAtxHeadings:
    @pytest.mark.parametrize("level", range(1, 7))
    def test_levels(self, level: int) -> None:
        (block,) = BlockParser("#" * level + " Title").parse()
        assert block.kind.name == f"ATX_{level}"
        assert block.content == (level + 1, level + 6)
        assert block.prefix[0].kind == TokenType.ATX_HEADER

    def test_seven_hashes_is_paragraph(self) -> None:
        assert kinds("####### x") == ["PARAGRAPH"]

    def test_no_space_is_paragraph(self) -> None:
        assert kinds("#5 bolt") == ["PARAGRAPH"]

    def test_up_to_three_spaces_indent(self) -> None:
        assert kinds("   # x") == ["ATX_1"]

    def test_closing_sequence(self) -> None:
        (block,) = BlockParser("## Title ##").parse()
        assert block.content == (3, 8)
        assert len(block.suffix) == 1
        assert (block.suffix[0].start, block.suffix[0].end) == (9, 11)

    def test_hashes_inside_word_kept(self) -> None:
        (block,) = BlockParser("# C#").parse()
        assert block.content == (2, 4)
        assert block.suffix == ()

    def test_empty_heading(self) -> None:
        (block,) = BlockParser("#").parse()
        assert block.kind == ElementType.ATX_1
        assert block.content is None

    def test_interrupts_paragraph(self) -> None:
        assert kinds("para\n# H\nmore") == ["PARAGRAPH", "ATX_1", "PARAGRAPH"]

    def test_to_node_wraps_content(self) -> None:
        (block,) = BlockParser("# Hi").parse()
        node = block.to_node()
        assert [child.kind for child in node.children] == [
            TokenType.ATX_HEADER,
            ElementType.ATX_CONTENT,
        ]


class TestLinkDefinitions:
    def test_definition(self) -> None:
        (block,) = BlockParser('[a]: /u "t"').parse()
        assert block.kind == ElementType.LINK_DEFINITION
        assert [part.kind for part in block.prefix] == [
            ElementType.LINK_LABEL,
            ElementType.LINK_DESTINATION,
            ElementType.LINK_TITLE,
        ]
        assert block.content is None
        assert (block.start, block.end) == (0, 11)

    def test_angle_destination(self) -> None:
        (block,) = BlockParser("[a]: <b c>").parse()
        assert block.prefix[1].text("[a]: <b c>") == "<b c>"

    def test_only_at_paragraph_start(self) -> None:
        assert kinds("a\n[x]: /u") == ["PARAGRAPH"]

    def test_followed_by_paragraph(self) -> None:
        assert kinds("[x]: /u\ntext") == ["LINK_DEFINITION", "PARAGRAPH"]

    def test_consecutive_definitions(self) -> None:
        assert kinds("[a]: /1\n[b]: /2") == ["LINK_DEFINITION", "LINK_DEFINITION"]

    def test_empty_label_is_paragraph(self) -> None:
        assert kinds("[]: /u") == ["PARAGRAPH"]
        assert kinds("[ ]: /u") == ["PARAGRAPH"]

    def test_missing_destination_is_paragraph(self) -> None:
        assert kinds("[a]:") == ["PARAGRAPH"]


class TestBlock:
    def test_frozen(self) -> None:
        block = Block(ElementType.PARAGRAPH, 0, 1, content=(0, 1))
        with pytest.raises(AttributeError):
            block.start = 2  # type: ignore[misc]

    def test_to_node_keeps_range(self) -> None:
        node = Block(ElementType.PARAGRAPH, 2, 7, content=(2, 7)).to_node()
        assert (node.kind, node.start, node.end, node.children) == (ElementType.PARAGRAPH, 2, 7, ())
