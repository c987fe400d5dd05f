"""Derive a dialect from GFM: swap one provider, keep everything else."""

from sabores import Markdown, get_dialect, register_dialect
from sabores.renderers.providers import SimpleInlineTagProvider
from sabores.tokens import GfmElementTypes


@register_dialect("gfm-del")
def build_gfm_del():
    """Strikethrough as a plain <del> element instead of a styled span."""
    return get_dialect("gfm").extend(
        "gfm-del",
        providers={GfmElementTypes.STRIKETHROUGH: SimpleInlineTagProvider("del", 2, -2)},
    )


md = Markdown(dialect="gfm-del")
print(md("~~old~~ new, see https://example.com/changes"))
