"""Sabores inline lexers.

Lexers turn a range of inline text into a TokenStream that the recognizer
chain consumes. Each dialect names its lexer class; the chain never cares
which one produced the tokens.

Available Lexers:
- InlineLexer: CommonMark token kinds
- GfmInlineLexer: adds TILDE and GFM_AUTOLINK

Thread Safety:
Tokenizing keeps all cursor state in locals. Lexers are safe to share.

"""

from sabores.lexer.core import InlineLexer
from sabores.lexer.gfm import GfmInlineLexer

__all__ = ["InlineLexer", "GfmInlineLexer"]
