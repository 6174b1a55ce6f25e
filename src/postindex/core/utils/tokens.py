"""Markdown-it helpers: parser construction and heading outline"""

from functools import lru_cache

from markdown_it import MarkdownIt

from postindex.core.models import Heading
from postindex.core.utils.slug import slugify


@lru_cache(maxsize=None)
def make_parser(preset: str = "gfm-like") -> MarkdownIt:
    """Build (once per preset) a MarkdownIt instance."""
    return MarkdownIt(preset, options_update={"linkify": False})


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def extract_headings(body: str, preset: str = "gfm-like") -> tuple[Heading, ...]:
    """Outline of body headings in document order.

    Anchors are slugified heading text; repeats get a -1, -2 ... suffix the
    way renderers usually disambiguate them.
    """
    tokens = make_parser(preset).parse(body)
    headings: list[Heading] = []
    seen: dict[str, int] = {}

    for i, tok in enumerate(tokens):
        level = heading_level(tok)
        if level is None or i + 1 >= len(tokens) or tokens[i + 1].type != 'inline':
            continue
        text = tokens[i + 1].content.strip()
        anchor = slugify(text) or "section"
        if anchor in seen:
            seen[anchor] += 1
            anchor = f"{anchor}-{seen[anchor]}"
        else:
            seen[anchor] = 0
        headings.append(Heading(level=level, text=text, anchor=anchor))

    return tuple(headings)
