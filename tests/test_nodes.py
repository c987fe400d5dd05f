"""Tests for SyntaxNode, the SyntaxTree arena and NodeRef navigation."""

from __future__ import annotations

import pytest

from sabores import parse
from sabores.errors import ParseError
from sabores.nodes import NodeRef, SyntaxNode, SyntaxTree
from sabores.tokens import ElementType, TokenSpan, TokenType


class TestSyntaxNode:
    def test_leaf_from_token(self) -> None:
        leaf = SyntaxNode.leaf(TokenSpan(TokenType.TEXT, 1, 4))
        assert leaf.kind == TokenType.TEXT
        assert (leaf.start, leaf.end) == (1, 4)
        assert leaf.children == ()

    def test_text(self) -> None:
        node = SyntaxNode(ElementType.PARAGRAPH, 2, 5)
        assert node.text("a bcd e") == "bcd"

    def test_frozen(self) -> None:
        node = SyntaxNode(ElementType.PARAGRAPH, 0, 1)
        with pytest.raises(AttributeError):
            node.start = 3  # type: ignore[misc]


class TestSyntaxTreeValidation:
    def test_child_past_parent_end(self) -> None:
        root = SyntaxNode(ElementType.DOCUMENT, 0, 5, (SyntaxNode(ElementType.PARAGRAPH, 3, 10),))
        with pytest.raises(ParseError) as exc_info:
            SyntaxTree(root, "hello")
        assert exc_info.value.lineno == 1
        assert exc_info.value.col_offset == 4

    def test_overlapping_siblings(self) -> None:
        root = SyntaxNode(
            ElementType.DOCUMENT,
            0,
            5,
            (SyntaxNode(ElementType.PARAGRAPH, 0, 3), SyntaxNode(ElementType.PARAGRAPH, 2, 5)),
        )
        with pytest.raises(ParseError):
            SyntaxTree(root, "hello")

    def test_root_outside_source(self) -> None:
        with pytest.raises(ParseError):
            SyntaxTree(SyntaxNode(ElementType.DOCUMENT, 0, 9), "short")

    def test_gaps_between_children_are_allowed(self) -> None:
        root = SyntaxNode(
            ElementType.DOCUMENT,
            0,
            5,
            (SyntaxNode(ElementType.PARAGRAPH, 0, 1), SyntaxNode(ElementType.PARAGRAPH, 3, 5)),
        )
        assert len(SyntaxTree(root, "a\n\nbc")) == 3

    def test_source_file_in_error(self) -> None:
        root = SyntaxNode(ElementType.DOCUMENT, 0, 2, (SyntaxNode(ElementType.PARAGRAPH, 1, 4),))
        with pytest.raises(ParseError, match="doc.md:1:2"):
            SyntaxTree(root, "ab", source_file="doc.md")


class TestNavigation:
    def test_walk_is_preorder(self) -> None:
        tree = parse("a *b*")
        kinds = [ref.kind.name for ref in tree.walk()]
        assert kinds[0] == "DOCUMENT"
        assert kinds[1] == "PARAGRAPH"
        assert kinds.index("PLAIN_TEXT") < kinds.index("EMPH")

    def test_parent_and_children(self) -> None:
        tree = parse("a *b*")
        paragraph = tree.root.children[0]
        assert paragraph.parent == tree.root
        assert tree.root.parent is None
        assert [c.kind for c in paragraph.children] == [ElementType.PLAIN_TEXT, ElementType.EMPH]

    def test_parent_of_type(self) -> None:
        tree = parse("[a *b*](/u)")
        emph = tree.find_all(ElementType.EMPH)[0]
        link_text = emph.parent_of_type(ElementType.LINK_TEXT)
        assert link_text is not None
        assert link_text.text() == "[a *b*]"
        assert emph.parent_of_type(ElementType.IMAGE) is None

    def test_child_of_type(self) -> None:
        tree = parse('[a](/u "t")')
        link = tree.find_all(ElementType.INLINE_LINK)[0]
        destination = link.child_of_type(ElementType.LINK_DESTINATION)
        assert destination is not None
        assert destination.text() == "/u"
        assert link.child_of_type(ElementType.LINK_LABEL) is None

    def test_is_leaf(self) -> None:
        tree = parse("*a*")
        emph = tree.find_all(ElementType.EMPH)[0]
        assert not emph.is_leaf
        assert emph.children[0].is_leaf

    def test_location(self) -> None:
        tree = parse("first\n\nsecond *x*", source_file="doc.md")
        emph = tree.find_all(ElementType.EMPH)[0]
        location = emph.location
        assert (location.lineno, location.col_offset) == (3, 8)
        assert location.source_file == "doc.md"

    def test_refs_compare_by_slot(self) -> None:
        tree = parse("a")
        assert tree.node(1) == tree.root.children[0]
        assert isinstance(tree.node(0), NodeRef)

    def test_node_index_out_of_range(self) -> None:
        tree = parse("a")
        with pytest.raises(IndexError):
            tree.node(len(tree))
