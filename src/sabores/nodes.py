"""Syntax tree for Sabores.

Two layers:

- ``SyntaxNode`` is the value the parsers build bottom-up: a kind, a
  ``[start, end)`` character range, and a tuple of children. Frozen, so a
  subtree can be shared or cached freely.
- ``SyntaxTree`` flattens a finished root into an arena. Every node gets an
  index, and parent back-references are stored as indices into the same
  table. Renderers walk the arena through ``NodeRef`` handles, which is how a
  provider asks "am I inside a link label?" without nodes owning their
  parents.

Thread Safety:
All three types are immutable once built and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from sabores.errors import ParseError
from sabores.location import SourceLocation
from sabores.tokens import ElementKind, TokenSpan


@dataclass(frozen=True, slots=True)
class SyntaxNode:
    """Immutable syntax node.

    Attributes:
        kind: Semantic role of the node
        start: Start offset into the source (inclusive)
        end: End offset into the source (exclusive)
        children: Ordered child nodes, contained in ``[start, end)``

    """

    kind: ElementKind
    start: int
    end: int
    children: tuple[SyntaxNode, ...] = ()

    @classmethod
    def leaf(cls, token: TokenSpan) -> SyntaxNode:
        """Wrap a lexer token as a leaf node."""
        return cls(token.type, token.start, token.end)

    def text(self, source: str) -> str:
        """Source text covered by this node."""
        return source[self.start : self.end]

    def __repr__(self) -> str:
        if self.children:
            return f"SyntaxNode({self.kind.name}, {self.start}:{self.end}, {len(self.children)} children)"
        return f"SyntaxNode({self.kind.name}, {self.start}:{self.end})"


class SyntaxTree:
    """Arena of syntax nodes with index-based parent links.

    Building the arena validates the structural invariants: every child lies
    within its parent's range, and siblings are ordered and non-overlapping.
    A violation means a collaborator produced bad ranges and raises
    ParseError.

    Usage:
        >>> tree = SyntaxTree(root, source)
        >>> for ref in tree.walk():
        ...     print(ref.kind, ref.parent)

    """

    __slots__ = ("_source", "_source_file", "_nodes", "_parents", "_children")

    def __init__(self, root: SyntaxNode, source: str, *, source_file: str | None = None) -> None:
        self._source = source
        self._source_file = source_file
        self._nodes: list[SyntaxNode] = []
        self._parents: list[int] = []
        child_lists: list[list[int]] = []

        if root.start < 0 or root.end > len(source) or root.start > root.end:
            self._fail(f"root range {root.start}:{root.end} outside source", root.start)

        # Preorder with reversed push keeps sibling indices in document order
        stack: list[tuple[SyntaxNode, int]] = [(root, -1)]
        while stack:
            node, parent = stack.pop()
            index = len(self._nodes)
            self._nodes.append(node)
            self._parents.append(parent)
            child_lists.append([])
            if parent >= 0:
                child_lists[parent].append(index)

            previous_end = node.start
            for child in node.children:
                if child.start < previous_end or child.end > node.end or child.start > child.end:
                    self._fail(
                        f"{child.kind.name} {child.start}:{child.end} does not fit in "
                        f"{node.kind.name} {node.start}:{node.end}",
                        child.start,
                    )
                previous_end = child.end
            for child in reversed(node.children):
                stack.append((child, index))

        self._children: list[tuple[int, ...]] = [tuple(c) for c in child_lists]

    def _fail(self, message: str, offset: int) -> None:
        loc = SourceLocation.from_offset(self._source, offset, source_file=self._source_file)
        raise ParseError(message, loc.lineno, loc.col_offset, self._source_file)

    @property
    def source(self) -> str:
        return self._source

    @property
    def source_file(self) -> str | None:
        return self._source_file

    @property
    def root(self) -> NodeRef:
        return NodeRef(self, 0)

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> NodeRef:
        """Handle for the node stored at index."""
        if not 0 <= index < len(self._nodes):
            raise IndexError(f"node index {index} out of range")
        return NodeRef(self, index)

    def walk(self) -> Iterator[NodeRef]:
        """Yield every node in document (preorder) order."""
        for index in range(len(self._nodes)):
            yield NodeRef(self, index)

    def find_all(self, kind: ElementKind) -> list[NodeRef]:
        """All nodes of one kind, in document order."""
        return [NodeRef(self, i) for i, n in enumerate(self._nodes) if n.kind == kind]

    def __repr__(self) -> str:
        return f"SyntaxTree({len(self._nodes)} nodes, {len(self._source)} chars)"


@dataclass(frozen=True, slots=True)
class NodeRef:
    """Handle to one node inside a SyntaxTree.

    Renderers receive NodeRefs, not bare SyntaxNodes, so they can navigate
    upward. Two refs are equal when they point at the same slot of the same
    tree.

    """

    tree: SyntaxTree = field(repr=False)
    index: int

    @property
    def node(self) -> SyntaxNode:
        return self.tree._nodes[self.index]

    @property
    def kind(self) -> ElementKind:
        return self.tree._nodes[self.index].kind

    @property
    def start(self) -> int:
        return self.tree._nodes[self.index].start

    @property
    def end(self) -> int:
        return self.tree._nodes[self.index].end

    @property
    def is_leaf(self) -> bool:
        """True for nodes wrapping a single lexer token."""
        return self.kind.is_token

    @property
    def children(self) -> tuple[NodeRef, ...]:
        return tuple(NodeRef(self.tree, i) for i in self.tree._children[self.index])

    @property
    def parent(self) -> NodeRef | None:
        parent = self.tree._parents[self.index]
        return None if parent < 0 else NodeRef(self.tree, parent)

    def parent_of_type(self, *kinds: ElementKind) -> NodeRef | None:
        """Nearest ancestor whose kind is one of ``kinds``."""
        parent = self.tree._parents[self.index]
        while parent >= 0:
            if self.tree._nodes[parent].kind in kinds:
                return NodeRef(self.tree, parent)
            parent = self.tree._parents[parent]
        return None

    def child_of_type(self, *kinds: ElementKind) -> NodeRef | None:
        """First direct child whose kind is one of ``kinds``."""
        for i in self.tree._children[self.index]:
            if self.tree._nodes[i].kind in kinds:
                return NodeRef(self.tree, i)
        return None

    def text(self) -> str:
        """Source text covered by this node."""
        node = self.tree._nodes[self.index]
        return self.tree.source[node.start : node.end]

    @property
    def location(self) -> SourceLocation:
        return SourceLocation.from_offset(
            self.tree.source, self.start, self.end, source_file=self.tree.source_file
        )

    def __repr__(self) -> str:
        return f"NodeRef({self.kind.name}, #{self.index}, {self.start}:{self.end})"
