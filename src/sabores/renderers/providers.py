"""Generating providers: one rendering rule per element kind.

A provider receives the visitor, the document source and a NodeRef, and
emits HTML through the visitor. Providers hold no per-document state: the
link map and base URI of the document being rendered live on the visitor,
so one provider instance serves every render of every document.

Thread Safety:
All providers are immutable after construction.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sabores.linkmap import LinkMap
from sabores.tokens import ElementType, GfmElementTypes, GfmTokenTypes, TokenType
from sabores.utils.text import EntityConverter, escape_html

if TYPE_CHECKING:
    from sabores.nodes import NodeRef
    from sabores.renderers.html import HtmlGeneratingVisitor


@runtime_checkable
class GeneratingProvider(Protocol):
    """Renders nodes of one kind into HTML."""

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        """Emit HTML for ``node`` through ``visitor``.

        Args:
            visitor: Per-render visitor owning the output buffer
            text: Full document source
            node: Node to render
        """
        ...


def _child_slice(node: NodeRef, render_from: int, render_to: int) -> tuple[NodeRef, ...]:
    """Children ``[render_from, len + render_to)``; ``render_to`` <= 0."""
    return node.children[render_from : render_to or None]


# =============================================================================
# Structural providers
# =============================================================================


class SimpleTagProvider:
    """Block element: ``<tag>`` children ``</tag>``."""

    __slots__ = ("tag_name",)

    def __init__(self, tag_name: str) -> None:
        self.tag_name = tag_name

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        visitor.consume_tag_open(node, self.tag_name)
        visitor.visit_children(node)
        visitor.consume_tag_close(self.tag_name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.tag_name!r})"


class SimpleInlineTagProvider:
    """Inline element rendering a slice of its children.

    ``render_from`` and ``render_to`` cut delimiter leaves off the ends:
    ``SimpleInlineTagProvider("strong", 2, -2)`` drops ``**`` on both sides.
    Subclasses customize the tags through ``open_tag`` and ``close_tag``.
    """

    __slots__ = ("tag_name", "render_from", "render_to")

    def __init__(self, tag_name: str, render_from: int = 0, render_to: int = 0) -> None:
        self.tag_name = tag_name
        self.render_from = render_from
        self.render_to = render_to

    def open_tag(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        visitor.consume_tag_open(node, self.tag_name)

    def close_tag(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        visitor.consume_tag_close(self.tag_name)

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        self.open_tag(visitor, text, node)
        for child in _child_slice(node, self.render_from, self.render_to):
            visitor.visit_node(child)
        self.close_tag(visitor, text, node)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.tag_name!r}, {self.render_from}, {self.render_to})"


class TransparentInlineHolderProvider:
    """Renders a slice of children with no wrapping markup."""

    __slots__ = ("render_from", "render_to")

    def __init__(self, render_from: int = 0, render_to: int = 0) -> None:
        self.render_from = render_from
        self.render_to = render_to

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        for child in _child_slice(node, self.render_from, self.render_to):
            visitor.visit_node(child)


_WHITESPACE_LEAVES = frozenset({TokenType.WHITE_SPACE, TokenType.EOL})


class TrimmingInlineHolderProvider:
    """Renders children, skipping whitespace leaves at either end."""

    __slots__ = ()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        children = node.children
        start, stop = 0, len(children)
        while start < stop and children[start].kind in _WHITESPACE_LEAVES:
            start += 1
        while stop > start and children[stop - 1].kind in _WHITESPACE_LEAVES:
            stop -= 1
        for child in children[start:stop]:
            visitor.visit_node(child)


class DocumentGeneratingProvider:
    """Top level: each block that emitted anything is followed by a newline."""

    __slots__ = ()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        for child in node.children:
            if child.is_leaf:
                continue
            mark = visitor.emitted
            visitor.visit_node(child)
            if visitor.emitted != mark:
                visitor.consume_html("\n")


class SkipProvider:
    """Emits nothing (link definitions, heading markers)."""

    __slots__ = ()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        return None


class HtmlTagProvider:
    """Raw inline HTML passes through unchanged."""

    __slots__ = ()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        visitor.consume_html(node.text())


class HardBreakProvider:
    __slots__ = ()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        visitor.consume_tag_open(node, "br", auto_close=True)
        visitor.consume_html("\n")


class EolProvider:
    """Soft line break."""

    __slots__ = ()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        visitor.consume_html("\n")


_LINE_ENDING = re.compile(r"\r?\n[ \t]*")


class CodeSpanGeneratingProvider:
    """``<code>`` with CommonMark 6.1 content normalization.

    Line endings become spaces; one leading and one trailing space are
    stripped when both are present and the content is not all spaces.
    """

    __slots__ = ()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        children = node.children
        content = text[children[0].end : children[-1].start]
        content = _LINE_ENDING.sub(" ", content)
        if len(content) >= 2 and content[0] == " " and content[-1] == " " and content.strip(" "):
            content = content[1:-1]
        visitor.consume_tag_open(node, "code")
        visitor.consume_html(escape_html(content))
        visitor.consume_tag_close("code")


# =============================================================================
# Links
# =============================================================================


@dataclass(frozen=True, slots=True)
class RenderInfo:
    """What a link renders: its visible label node and attribute values.

    ``destination`` and ``title`` are already normalized for attributes.
    """

    label: NodeRef
    destination: str
    title: str | None = None


class LinkGeneratingProvider:
    """Base for anchor-emitting providers.

    Subclasses implement ``get_render_info``; returning None renders the
    node's children as plain content.
    """

    __slots__ = ()

    def get_render_info(self, visitor: HtmlGeneratingVisitor, node: NodeRef) -> RenderInfo | None:
        raise NotImplementedError

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        info = self.get_render_info(visitor, node)
        if info is None:
            visitor.visit_children(node)
            return
        self.render_link(visitor, node, info)

    def render_link(self, visitor: HtmlGeneratingVisitor, node: NodeRef, info: RenderInfo) -> None:
        title = f'title="{info.title}"' if info.title is not None else None
        visitor.consume_tag_open(node, "a", f'href="{info.destination}"', title)
        visitor.visit_node(info.label)
        visitor.consume_tag_close("a")


class InlineLinkGeneratingProvider(LinkGeneratingProvider):
    """``[text](destination "title")``."""

    __slots__ = ()

    def get_render_info(self, visitor: HtmlGeneratingVisitor, node: NodeRef) -> RenderInfo | None:
        label = node.child_of_type(ElementType.LINK_TEXT)
        if label is None:
            return None
        destination = node.child_of_type(ElementType.LINK_DESTINATION)
        title = node.child_of_type(ElementType.LINK_TITLE)
        return RenderInfo(
            label=label,
            destination=LinkMap.normalize_destination(
                destination.text() if destination is not None else "",
                True,
                base_uri=visitor.base_uri,
            ),
            title=LinkMap.normalize_title(title.text() if title is not None else None),
        )


class ReferenceLinksGeneratingProvider(LinkGeneratingProvider):
    """Full, collapsed and shortcut reference links, resolved through the link map."""

    __slots__ = ()

    def get_render_info(self, visitor: HtmlGeneratingVisitor, node: NodeRef) -> RenderInfo | None:
        label = node.child_of_type(ElementType.LINK_LABEL)
        if label is None or visitor.link_map is None:
            return None
        info = visitor.link_map.get(label.text())
        if info is None:
            return None
        link_text = node.child_of_type(ElementType.LINK_TEXT) or label
        return RenderInfo(
            label=link_text,
            destination=LinkMap.normalize_destination(
                info.destination, True, base_uri=visitor.base_uri
            ),
            title=LinkMap.normalize_title(info.title),
        )


# Leaves that are markup, not text, when they sit directly under these kinds
_DELIMITED = frozenset({
    ElementType.EMPH,
    ElementType.STRONG,
    ElementType.CODE_SPAN,
    ElementType.IMAGE,
    ElementType.INLINE_LINK,
    ElementType.FULL_REFERENCE_LINK,
    ElementType.SHORT_REFERENCE_LINK,
    ElementType.LINK_TEXT,
    ElementType.LINK_LABEL,
    GfmElementTypes.STRIKETHROUGH,
})
_NOT_TEXT = frozenset({ElementType.LINK_DESTINATION, ElementType.LINK_TITLE})


def _plain_text(node: NodeRef, parts: list[str]) -> None:
    """Collect the text of a subtree with markup delimiters removed."""
    for child in node.children:
        if child.kind in _NOT_TEXT:
            continue
        if child.kind == ElementType.FULL_REFERENCE_LINK:
            # The label names a definition; only the link text is visible
            label = child.child_of_type(ElementType.LINK_TEXT)
            if label is not None:
                _plain_text(label, parts)
        elif child.is_leaf:
            if not _is_delimiter(node, child):
                parts.append(child.text())
        else:
            _plain_text(child, parts)


def _is_delimiter(parent: NodeRef, leaf: NodeRef) -> bool:
    """True if the leaf is one of the parent's own delimiters."""
    kind = parent.kind
    if kind not in _DELIMITED:
        return False
    if kind in (ElementType.EMPH, ElementType.STRONG):
        return leaf.kind == TokenType.EMPH
    if kind == GfmElementTypes.STRIKETHROUGH:
        return leaf.kind == GfmTokenTypes.TILDE
    if kind == ElementType.CODE_SPAN:
        return leaf.kind == TokenType.BACKTICK and (leaf.start == parent.start or leaf.end == parent.end)
    if kind in (ElementType.LINK_TEXT, ElementType.LINK_LABEL):
        return leaf.start == parent.start or leaf.end == parent.end
    # Links and images: every direct leaf is punctuation
    return True


class ImageGeneratingProvider:
    """``![alt](src "title")`` and reference images → ``<img />``.

    The alt attribute is the plain text of the description.
    """

    __slots__ = ("_inline", "_reference")

    def __init__(self) -> None:
        self._inline = InlineLinkGeneratingProvider()
        self._reference = ReferenceLinksGeneratingProvider()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        link = node.child_of_type(ElementType.INLINE_LINK)
        if link is not None:
            info = self._inline.get_render_info(visitor, link)
        else:
            link = node.child_of_type(ElementType.FULL_REFERENCE_LINK, ElementType.SHORT_REFERENCE_LINK)
            info = self._reference.get_render_info(visitor, link) if link is not None else None
        if info is None:
            visitor.visit_children(node)
            return

        parts: list[str] = []
        _plain_text(info.label, parts)
        alt = EntityConverter.replace_entities("".join(parts), True, True)
        title = f'title="{info.title}"' if info.title is not None else None
        visitor.consume_tag_open(
            node, "img", f'src="{info.destination}"', f'alt="{alt}"', title, auto_close=True
        )


class AutolinkGeneratingProvider:
    """``<scheme:...>`` and ``<local@domain>`` autolinks."""

    __slots__ = ()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        link_text = node.text()[1:-1]
        destination = link_text
        leaf = node.child_of_type(TokenType.EMAIL_AUTOLINK)
        if leaf is not None:
            destination = "mailto:" + link_text
        visitor.consume_tag_open(node, "a", f'href="{LinkMap.normalize_destination(destination, False)}"')
        visitor.consume_html(EntityConverter.replace_entities(link_text, True, False))
        visitor.consume_tag_close("a")


class GfmAutolinkGeneratingProvider:
    """Bare ``www.`` domains and ``scheme://`` URLs → ``<a>``.

    Inside the text or label of another link the autolink renders as
    escaped text so anchors never nest.

    The lexer only produces GFM_AUTOLINK tokens that begin with a scheme or
    with ``www.``, so the destination gets ``http://`` prepended exactly when
    the text starts with ``www.``; everything else is taken as already
    carrying its scheme.
    """

    __slots__ = ()

    def process_node(self, visitor: HtmlGeneratingVisitor, text: str, node: NodeRef) -> None:
        link_text = node.text()
        link = EntityConverter.replace_entities(link_text, True, False)

        if node.parent_of_type(ElementType.LINK_LABEL, ElementType.LINK_TEXT) is not None:
            visitor.consume_html(link)
            return

        destination = "http://" + link_text if link_text.startswith("www.") else link_text
        visitor.consume_tag_open(node, "a", f'href="{LinkMap.normalize_destination(destination, False)}"')
        visitor.consume_html(link)
        visitor.consume_tag_close("a")
