"""Parse and render Markdown in 3 lines, bare URLs included."""

from sabores import parse, render

doc = parse("# Hello **World**\n\nDocs live at www.example.com.")
html = render(doc)
print(html)
