"""GitHub-flavored inline lexer.

Adds two token kinds on top of the CommonMark lexer:

- TILDE for ``~`` (strikethrough delimiters)
- GFM_AUTOLINK for bare ``www.`` domains and ``http://``, ``https://``,
  ``ftp://`` URLs, following the GFM 0.29 extended autolink rules

An extended autolink only starts at the beginning of the range or after
whitespace, ``*``, ``_``, ``~``, ``(`` or ``[``. Its end is trimmed of trailing
punctuation, unbalanced closing parentheses, and entity-like suffixes.

"""

from __future__ import annotations

import re

from sabores.lexer.core import InlineLexer
from sabores.parsing.charsets import (
    AUTOLINK_BOUNDARY,
    AUTOLINK_TRAILING_PUNCTUATION,
    GFM_INLINE_SPECIAL,
)
from sabores.tokens import ElementKind, GfmTokenTypes

_WWW_RE = re.compile(r"www\.[a-zA-Z0-9_\-]+(?:\.[a-zA-Z0-9_\-]+)*")
_SCHEME_RE = re.compile(r"(?:https?|ftp)://[a-zA-Z0-9_\-]+(?:\.[a-zA-Z0-9_\-]+)*", re.IGNORECASE)
_ENTITY_SUFFIX_RE = re.compile(r"&[a-zA-Z0-9]+;$")

# Characters that end an extended autolink path
_PATH_STOP = frozenset(" \t\n<[]")

# Characters that may start an extended autolink
_AUTOLINK_STARTS = frozenset("wWhHfF")


class GfmInlineLexer(InlineLexer):
    """Inline lexer for the GitHub-flavored dialect."""

    __slots__ = ()

    special = GFM_INLINE_SPECIAL

    def _scan(self, pos: int, start: int, end: int) -> tuple[ElementKind, int]:
        char = self._source[pos]
        if char == "~":
            return GfmTokenTypes.TILDE, pos + 1
        if char in _AUTOLINK_STARTS and (pos == start or self._source[pos - 1] in AUTOLINK_BOUNDARY):
            link_end = self._scan_extended_autolink(pos, end)
            if link_end is not None:
                return GfmTokenTypes.GFM_AUTOLINK, link_end
        return super()._scan(pos, start, end)

    def _scan_extended_autolink(self, pos: int, end: int) -> int | None:
        """Return the end of a ``www.``/``scheme://`` autolink at pos, or None."""
        source = self._source
        match = _WWW_RE.match(source, pos, end) or _SCHEME_RE.match(source, pos, end)
        if match is None:
            return None
        domain_end = match.end()

        # Path: anything up to whitespace, "<" or a bracket
        link_end = domain_end
        while link_end < end and source[link_end] not in _PATH_STOP:
            link_end += 1

        link_end = self._trim_autolink_end(pos, link_end)
        # Trimming may have eaten into the domain; it must still be valid
        if not (_WWW_RE.match(source, pos, link_end) or _SCHEME_RE.match(source, pos, link_end)):
            return None
        return link_end

    def _trim_autolink_end(self, pos: int, link_end: int) -> int:
        """GFM extended autolink path validation.

        Trailing punctuation is dropped, a trailing ``)`` only while the link
        has more ``)`` than ``(``, and a trailing ``&name;`` is dropped.
        """
        source = self._source
        while link_end > pos:
            char = source[link_end - 1]
            if char in AUTOLINK_TRAILING_PUNCTUATION:
                link_end -= 1
                continue
            if char == ")":
                link = source[pos:link_end]
                if link.count(")") > link.count("("):
                    link_end -= 1
                    continue
                break
            if char == ";":
                match = _ENTITY_SUFFIX_RE.search(source, pos, link_end)
                if match:
                    link_end = match.start()
                    continue
                break
            break
        return link_end
