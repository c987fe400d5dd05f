"""Parsing subsystem for Sabores.

- `BlockParser`: line-window scan into paragraphs, headings and link
  reference definitions
- `SequentialParserManager`: the inline recognizer chain
- `charsets`: character classes shared by the lexers and recognizers

"""

from sabores.parsing.blocks import Block, BlockParser
from sabores.parsing.inline import InlineContext, SequentialParserManager

__all__ = [
    "Block",
    "BlockParser",
    "InlineContext",
    "SequentialParserManager",
]
