"""Inline parsing subsystem for Sabores.

A dialect's inline stage is an ordered chain of recognizers:
- Autolinks (<...>) and GFM bare links (www., https://)
- Code spans (`)
- Images, inline links and reference links
- Strikethrough (~~)
- Emphasis and strong (*, _)

Architecture:
Priority order decides every ambiguity. The first recognizer in the chain
that claims a position wins; there is no backtracking across recognizers.

"""

from __future__ import annotations

from sabores.parsing.inline.chain import (
    Claim,
    InlineContext,
    SequentialParser,
    SequentialParserManager,
)
from sabores.parsing.inline.emphasis import EmphStrongParser, StrikeThroughParser
from sabores.parsing.inline.links import ImageParser, InlineLinkParser, ReferenceLinkParser
from sabores.parsing.inline.spans import AutolinkParser, BacktickParser, GfmAutolinkParser

__all__ = [
    "AutolinkParser",
    "BacktickParser",
    "Claim",
    "EmphStrongParser",
    "GfmAutolinkParser",
    "ImageParser",
    "InlineContext",
    "InlineLinkParser",
    "ReferenceLinkParser",
    "SequentialParser",
    "SequentialParserManager",
    "StrikeThroughParser",
]
