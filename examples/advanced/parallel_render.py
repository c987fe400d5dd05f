"""Render many documents across threads with one shared Markdown instance."""

from concurrent.futures import ThreadPoolExecutor

from sabores import Markdown

md = Markdown(base_uri="https://docs.example.com/")

documents = [f"# Page {i}\n\nSee [the index](index.html) or www.example.com/{i}" for i in range(8)]

with ThreadPoolExecutor(max_workers=4) as executor:
    for html in executor.map(md, documents):
        print(html)
