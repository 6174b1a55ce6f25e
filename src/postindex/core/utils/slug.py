"""Slug generation for posts, headings and tags"""

import re
from pathlib import PurePosixPath


FALLBACK_SLUG = "post"


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def post_slug(source_path: str, ordinal: int = 0) -> str:
    """Slug for the ordinal-th document of source_path: 'dir/My Post.md', 1 -> 'dir-my-post-1'.

    Directory components are kept so equal file names in different folders
    do not collide; the extension is dropped.
    """
    stem = PurePosixPath(source_path).with_suffix("")
    base = slugify(" ".join(stem.parts)) or FALLBACK_SLUG
    return f"{base}-{ordinal}" if ordinal > 0 else base


def normalize_tag(tag: str) -> str:
    """Tag index key: 'Open-Source ' and 'open-source' collapse to one key."""
    return tag.strip().lower()


def tag_slug(tag: str) -> str:
    """URL segment for a tag page, e.g. 'Machine Learning' -> 'machine-learning'."""
    return re.sub(r'\s+', '-', normalize_tag(tag))
