"""Link reference definitions and destination normalization.

``LinkMap`` is the reference-link bookkeeping for one document: it collects
``[label]: destination "title"`` definitions from a parsed tree so reference
links can be resolved at parse time (does the label exist?) and at render
time (where does it point?).

The static helpers normalize destinations and titles for emission as HTML
attributes. Normalization is deliberately lenient: a destination that cannot
be canonicalized is emitted as given (escaped), never rejected.

Thread Safety:
LinkMap is immutable after build() and safe to share.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote as url_quote
from urllib.parse import urljoin, urlsplit

from sabores.tokens import ElementType
from sabores.utils.logger import get_logger
from sabores.utils.text import EntityConverter, decode_entities, escape_html, strip_backslash_escapes

if TYPE_CHECKING:
    from sabores.nodes import SyntaxTree

logger = get_logger(__name__)

# RFC 3986 reserved + unreserved, plus % so existing escapes survive
_URL_SAFE = "/:?#[]@!$&'()*+,;=-_.~%"

_WHITESPACE_PATTERN = re.compile(r"[ \t\r\n]+")


@dataclass(frozen=True, slots=True)
class LinkInfo:
    """A resolved link reference definition (raw source text)."""

    destination: str
    title: str | None = None


def _unescape_label(label: str) -> str:
    """Unescape label-specific escapes (backslash, [, ]).

    Other escapes stay literal so ``[foo\\!]`` does not match ``[foo!]``.
    """
    return label.replace("\\\\", "\\").replace("\\[", "[").replace("\\]", "]")


class LinkMap:
    """Link reference definitions of one document, keyed by normalized label."""

    __slots__ = ("_links",)

    def __init__(self, links: dict[str, LinkInfo] | None = None) -> None:
        self._links: dict[str, LinkInfo] = dict(links or {})

    @classmethod
    def build(cls, tree: SyntaxTree) -> LinkMap:
        """Collect every LINK_DEFINITION in the tree.

        The first definition of a label wins, later duplicates are ignored.
        """
        links: dict[str, LinkInfo] = {}
        for definition in tree.find_all(ElementType.LINK_DEFINITION):
            label = definition.child_of_type(ElementType.LINK_LABEL)
            destination = definition.child_of_type(ElementType.LINK_DESTINATION)
            if label is None or destination is None:
                continue
            key = cls.normalize_label(label.text())
            if not key or key in links:
                continue
            title = definition.child_of_type(ElementType.LINK_TITLE)
            links[key] = LinkInfo(
                destination=destination.text(),
                title=title.text() if title is not None else None,
            )
        return cls(links)

    def get(self, label: str) -> LinkInfo | None:
        """Look up a label (raw or already normalized)."""
        return self._links.get(self.normalize_label(label))

    def __contains__(self, label: str) -> bool:
        return self.get(label) is not None

    def __len__(self) -> int:
        return len(self._links)

    @property
    def labels(self) -> frozenset[str]:
        """Normalized labels of all definitions."""
        return frozenset(self._links)

    # =========================================================================
    # Normalization helpers
    # =========================================================================

    @staticmethod
    def normalize_label(label: str) -> str:
        """Normalize a link label for matching.

        CommonMark 4.7: case-insensitive (Unicode case fold), whitespace runs
        collapse to one space. Enclosing brackets are dropped.
        """
        label = label.strip()
        if label.startswith("[") and label.endswith("]"):
            label = label[1:-1]
        unescaped = _unescape_label(label)
        return _WHITESPACE_PATTERN.sub(" ", unescaped.strip()).casefold()

    @staticmethod
    def normalize_destination(
        destination: str, process_escapes: bool = True, *, base_uri: str | None = None
    ) -> str:
        """Canonicalize a destination for use as an ``href``/``src`` value.

        Strips enclosing ``<>``, optionally processes backslash escapes,
        resolves relative references against ``base_uri``, decodes entities,
        percent-encodes characters outside the URL-safe set, then HTML-escapes
        the result. Never raises: on failure the destination is emitted as
        given, HTML-escaped.

        Examples:
            >>> LinkMap.normalize_destination("<a b&amp;c>")
            'a%20b&amp;c'
        """
        destination = destination.strip()
        if len(destination) >= 2 and destination[0] == "<" and destination[-1] == ">":
            destination = destination[1:-1]
        try:
            raw = strip_backslash_escapes(destination) if process_escapes else destination
            raw = LinkMap.resolve_destination(raw, base_uri)
            encoded = url_quote(decode_entities(raw), safe=_URL_SAFE)
        except (ValueError, UnicodeError):
            logger.debug("Destination normalization failed for %r", destination, exc_info=True)
            encoded = destination
        return escape_html(encoded)

    @staticmethod
    def normalize_title(title: str | None) -> str | None:
        """Strip title delimiters and escape the content for an attribute."""
        if title is None:
            return None
        title = title.strip()
        if len(title) >= 2 and (title[0], title[-1]) in (('"', '"'), ("'", "'"), ("(", ")")):
            title = title[1:-1]
        return EntityConverter.replace_entities(title, True, True)

    @staticmethod
    def resolve_destination(destination: str, base_uri: str | None) -> str:
        """Resolve a relative destination against a base URI.

        Absolute URIs and fragment-only references are returned unchanged, as
        is everything when no base is configured.
        """
        if not base_uri or not destination or destination.startswith("#"):
            return destination
        try:
            if urlsplit(destination).scheme:
                return destination
            return urljoin(base_uri, destination)
        except ValueError:
            logger.debug("Could not resolve %r against %r", destination, base_uri)
            return destination
