"""Index builder: pure aggregation of Posts into a sorted PostIndex with a tag index"""

from typing import Iterable

from postindex.core.models import Post, PostIndex
from postindex.core.utils.slug import normalize_tag
from postindex.log import get_logger


log = get_logger(__name__)


def sort_posts(posts: Iterable[Post]) -> list[Post]:
    """Newest first; equal dates ordered by slug ascending."""
    by_slug = sorted(posts, key=lambda p: p.slug)
    return sorted(by_slug, key=lambda p: p.metadata.date, reverse=True)


def build_tag_index(posts: list[Post]) -> dict[str, tuple[str, ...]]:
    """Map normalized tag -> slugs of the posts carrying it, in the order of `posts`."""
    tag_index: dict[str, list[str]] = {}
    for post in posts:
        for tag in post.metadata.tags:
            slugs = tag_index.setdefault(normalize_tag(tag), [])
            if post.slug not in slugs:
                slugs.append(post.slug)
    return {tag: tuple(tag_index[tag]) for tag in sorted(tag_index)}


def build_index(posts: Iterable[Post]) -> PostIndex:
    """Build a new PostIndex from a collection of Posts. Same input, same output."""
    ordered = sort_posts(posts)
    index = PostIndex(posts=tuple(ordered), tag_index=build_tag_index(ordered))
    log.info("index.built", posts=len(index.posts), tags=len(index.tag_index))
    return index
