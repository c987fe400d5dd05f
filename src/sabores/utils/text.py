"""Entity and escape conversion for HTML output.

Two services the renderers lean on:

- ``escape_html`` escapes ``& < > "`` for text and attribute values.
- ``EntityConverter.replace_entities`` turns raw Markdown text into HTML
  text, decoding valid character references and backslash escapes and
  escaping everything else exactly once.

Example:
    >>> EntityConverter.replace_entities("a &amp; b & \\\\* &copy;")
    'a &amp; b &amp; * ©'
"""

from __future__ import annotations

import html as html_module
import re
from html.entities import html5

# CommonMark: ASCII punctuation that can be backslash-escaped
ESCAPABLE_CHARS = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

_ESCAPE_PATTERN = re.compile(r"\\([!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~])")

_REFERENCE = r"#[xX][0-9a-fA-F]{1,6}|#[0-9]{1,7}|[a-zA-Z][a-zA-Z0-9]{0,31}"

_REFERENCE_PATTERN = re.compile(rf"&({_REFERENCE});")

# Order matters: references, then backslash escapes, then lone specials
_CONVERT_PATTERN = re.compile(
    rf"&(?P<ref>{_REFERENCE});"
    r"|\\(?P<escaped>[!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~])"
    r"|(?P<special>[&<>\"])"
)

_HTML_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;"}


def escape_html(text: str) -> str:
    """Escape ``& < > "`` (but not single quotes, as CommonMark output does).

    Examples:
        >>> escape_html('<a href="x">')
        '&lt;a href=&quot;x&quot;&gt;'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=False).replace('"', "&quot;")


def strip_backslash_escapes(text: str) -> str:
    """Replace backslash escapes of ASCII punctuation with the literal char."""
    return _ESCAPE_PATTERN.sub(r"\1", text)


def decode_reference(ref: str) -> str | None:
    """Decode the inside of a character reference (``amp``, ``#35``, ``#x1F``).

    Returns:
        The decoded text, or None if ``ref`` names no known entity.
    """
    if ref.startswith("#"):
        try:
            if ref[1:2] in ("x", "X"):
                codepoint = int(ref[2:], 16)
            else:
                codepoint = int(ref[1:])
        except ValueError:
            return None
        # CommonMark: NUL and out-of-range code points become U+FFFD
        if codepoint == 0 or codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            return "\ufffd"
        return chr(codepoint)

    # Only complete names; html.unescape would also take legacy prefixes like "&not"
    return html5.get(f"{ref};")


def decode_entities(text: str) -> str:
    """Decode complete ``&...;`` references, leaving anything else verbatim.

    Examples:
        >>> decode_entities("?a=1&copy=2&amp;b=&copy;")
        '?a=1&copy=2&b=©'
    """
    if "&" not in text:
        return text

    def convert(match: re.Match[str]) -> str:
        decoded = decode_reference(match.group(1))
        return match.group(0) if decoded is None else decoded

    return _REFERENCE_PATTERN.sub(convert, text)


class EntityConverter:
    """Raw Markdown text to HTML text.

    Stateless; the methods are static so the converter can be passed around
    as a service object or called directly.
    """

    @staticmethod
    def replace_entities(
        text: str, process_entities: bool = True, process_escapes: bool = True
    ) -> str:
        """Escape text for HTML output, exactly once.

        Args:
            text: Raw source text
            process_entities: Decode valid ``&...;`` references before
                escaping. When False, every ``&`` is escaped.
            process_escapes: Turn ``\\X`` (X ASCII punctuation) into ``X``.

        Returns:
            HTML-safe text. Already-escaped references such as ``&amp;`` are
            not double-escaped when ``process_entities`` is set.
        """
        if not text:
            return ""

        def convert(match: re.Match[str]) -> str:
            ref = match.group("ref")
            if ref is not None:
                decoded = decode_reference(ref) if process_entities else None
                if decoded is None:
                    return "&amp;" + escape_html(match.group(0)[1:])
                return escape_html(decoded)

            escaped = match.group("escaped")
            if escaped is not None:
                if process_escapes:
                    return _HTML_ESCAPES.get(escaped, escaped)
                return "\\" + _HTML_ESCAPES.get(escaped, escaped)

            return _HTML_ESCAPES[match.group("special")]

        return _CONVERT_PATTERN.sub(convert, text)
