"""HTML generation by registry dispatch.

``HtmlGenerator`` walks a SyntaxTree and, for each node, asks the provider
registry how to render it. The walk itself knows no Markdown: all markup
decisions live in the providers.

Dispatch rule for a node:
1. A provider registered for the node's kind renders it.
2. Otherwise a leaf renders its source text, escaped.
3. Otherwise a composite renders its children.

Thread Safety:
All per-render state lives in an HtmlGeneratingVisitor created fresh for
each generate_html() call. Generators, registries and providers can be
shared across threads.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from sabores.config import get_parse_config
from sabores.errors import RenderError
from sabores.linkmap import LinkMap
from sabores.stringbuilder import StringBuilder
from sabores.tokens import TokenType
from sabores.utils.logger import get_logger
from sabores.utils.text import EntityConverter

if TYPE_CHECKING:
    from sabores.dialects.descriptor import DialectDescriptor
    from sabores.nodes import NodeRef, SyntaxTree
    from sabores.renderers.registry import ProviderRegistry

logger = get_logger(__name__)


class HtmlGeneratingVisitor:
    """Per-render traversal state and output buffer.

    Providers call back into the visitor to emit markup and to render
    subtrees. ``link_map`` and ``base_uri`` describe the document being
    rendered.
    """

    __slots__ = ("_sb", "_registry", "source", "link_map", "base_uri", "text_transformer")

    def __init__(
        self,
        source: str,
        registry: ProviderRegistry,
        *,
        link_map: LinkMap | None = None,
        base_uri: str | None = None,
        text_transformer: Callable[[str], str] | None = None,
    ) -> None:
        self._sb = StringBuilder()
        self._registry = registry
        self.source = source
        self.link_map = link_map
        self.base_uri = base_uri
        self.text_transformer = text_transformer

    def visit_node(self, node: NodeRef) -> None:
        provider = self._registry.lookup(node.kind)
        if provider is not None:
            provider.process_node(self, self.source, node)
        elif node.is_leaf:
            self.visit_leaf(node)
        else:
            self.visit_children(node)

    def visit_children(self, node: NodeRef) -> None:
        for child in node.children:
            self.visit_node(child)

    def visit_leaf(self, node: NodeRef) -> None:
        """Escaped source text; TEXT leaves pass through the text transformer."""
        text = node.text()
        if self.text_transformer is not None and node.kind == TokenType.TEXT:
            text = self.text_transformer(text)
        self._sb.append(EntityConverter.replace_entities(text, True, True))

    def consume_tag_open(
        self, node: NodeRef, tag_name: str, *attributes: str | None, auto_close: bool = False
    ) -> None:
        """Emit ``<tag attr...>``; None attributes are skipped."""
        sb = self._sb
        sb.append("<").append(tag_name)
        for attribute in attributes:
            if attribute is not None:
                sb.append(" ").append(attribute)
        sb.append(" />" if auto_close else ">")

    def consume_tag_close(self, tag_name: str) -> None:
        self._sb.append("</").append(tag_name).append(">")

    def consume_html(self, html: str) -> None:
        """Emit already-safe HTML verbatim."""
        self._sb.append(html)

    @property
    def emitted(self) -> int:
        """Fragments emitted so far; compare two readings to detect output."""
        return len(self._sb)

    def build(self) -> str:
        return self._sb.build()


class HtmlGenerator:
    """Renders one parsed document to HTML.

    Usage:
        >>> tree = parse("Visit www.example.com")
        >>> HtmlGenerator(tree.source, tree, registry).generate_html()
        '<p>Visit <a href="http://www.example.com">www.example.com</a></p>\\n'

    Args:
        source: Document text the tree's offsets refer to
        tree: Parsed tree
        registry: Provider registry of the dialect
        link_map: Reference definitions; collected from the tree when omitted
        base_uri: Base for resolving relative link destinations
        text_transformer: Optional callback applied to plain text

    """

    __slots__ = ("_source", "_tree", "_registry", "_link_map", "_base_uri", "_text_transformer")

    def __init__(
        self,
        source: str,
        tree: SyntaxTree,
        registry: ProviderRegistry,
        *,
        link_map: LinkMap | None = None,
        base_uri: str | None = None,
        text_transformer: Callable[[str], str] | None = None,
    ) -> None:
        if tree.root.end > len(source):
            raise RenderError(
                f"Tree covers {tree.root.start}:{tree.root.end} but source has {len(source)} chars"
            )
        self._source = source
        self._tree = tree
        self._registry = registry
        self._link_map = link_map if link_map is not None else LinkMap.build(tree)
        self._base_uri = base_uri
        self._text_transformer = text_transformer

    def generate_html(self) -> str:
        visitor = HtmlGeneratingVisitor(
            self._source,
            self._registry,
            link_map=self._link_map,
            base_uri=self._base_uri,
            text_transformer=self._text_transformer,
        )
        visitor.visit_node(self._tree.root)
        return visitor.build()


class HtmlRenderer:
    """ASTRenderer that renders trees with a dialect's providers.

    Thread Safety:
        Holds only immutable configuration. Each render() call builds its own
        visitor, so one renderer can serve concurrent threads.
    """

    __slots__ = ("_dialect", "_base_uri", "_text_transformer")

    def __init__(
        self,
        dialect: DialectDescriptor | None = None,
        *,
        base_uri: str | None = None,
        text_transformer: Callable[[str], str] | None = None,
    ) -> None:
        if dialect is None:
            from sabores.dialects import get_dialect

            dialect = get_dialect("gfm")
        self._dialect = dialect
        self._base_uri = base_uri
        self._text_transformer = text_transformer

    @property
    def dialect(self) -> DialectDescriptor:
        return self._dialect

    def render(self, tree: SyntaxTree) -> str:
        """Render ``tree``; unset options fall back to the active ParseConfig."""
        logger.debug("Rendering %r with dialect %s", tree, self._dialect.name)
        config = get_parse_config()
        base_uri = self._base_uri if self._base_uri is not None else config.base_uri
        return HtmlGenerator(
            tree.source,
            tree,
            self._dialect.registry,
            base_uri=base_uri,
            text_transformer=self._text_transformer or config.text_transformer,
        ).generate_html()
