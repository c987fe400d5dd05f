"""Character sets for O(1) classification.

All sets are module-level frozensets: immutable, shared, never rebuilt.

Reference: CommonMark 0.31.2 specification, GFM 0.29 autolink extension.

Usage:
    from sabores.parsing.charsets import ASCII_PUNCTUATION

    if char in ASCII_PUNCTUATION:  # O(1) lookup
        ...
"""

import unicodedata

# CommonMark: ASCII punctuation characters
# https://spec.commonmark.org/0.31.2/#ascii-punctuation-character
ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


def is_unicode_punctuation(char: str) -> bool:
    """Check if character is Unicode punctuation or symbol (P* or S*).

    CommonMark uses these categories for flanking rules; ASCII punctuation
    is a subset.

    """
    if not char:
        return False
    if char in ASCII_PUNCTUATION:
        return True
    cat = unicodedata.category(char)
    return cat.startswith("P") or cat.startswith("S")


WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")


def is_unicode_whitespace(char: str) -> bool:
    """Check if character is Unicode whitespace.

    The empty string counts as whitespace so start/end of text behave like a
    space in flanking checks.

    """
    if not char:
        return True
    if char in WHITESPACE:
        return True
    return unicodedata.category(char) == "Zs"


# Characters that end a TEXT run in the CommonMark inline lexer
INLINE_SPECIAL: frozenset[str] = frozenset("*_`[]()!<>:'\"\\&\n \t")

# GFM adds ~ for strikethrough
GFM_INLINE_SPECIAL: frozenset[str] = INLINE_SPECIAL | frozenset("~")

# GFM: an extended autolink may only start after these (or at line start);
# "[" lets a bare URL serve as link text
AUTOLINK_BOUNDARY: frozenset[str] = frozenset(" \t\n*_~([")

# GFM: trailing punctuation dropped from the end of an extended autolink
AUTOLINK_TRAILING_PUNCTUATION: frozenset[str] = frozenset("?!.,:*_~'\"")
