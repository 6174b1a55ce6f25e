"""Export: deterministic JSON for the index and error report, normalized markdown per post"""

import json
from pathlib import Path
from typing import Any, Iterable

import yaml

from postindex.core.errors import ErrorReport
from postindex.core.models import Post, PostIndex
from postindex.core.utils.slug import tag_slug


INDEX_FILE = "index.json"
ERRORS_FILE = "errors.json"
POSTS_DIR = "posts"


def post_to_dict(post: Post, include_body: bool = True) -> dict[str, Any]:
    """Flat, JSON-ready view of a post for renderers, feeds and search indexers."""
    meta = post.metadata
    data = {
        "slug": post.slug,
        "title": meta.title,
        "date": meta.date.isoformat(),
        "excerpt": meta.excerpt,
        "tags": list(meta.tags),
        "featured": meta.featured,
        "cover_image": meta.cover_image,
        "word_count": post.word_count,
        "reading_time": post.reading_time,
        "source_path": post.source_path,
        "ordinal": post.ordinal,
        "content_hash": post.content_hash,
        "headings": [h.model_dump() for h in post.headings],
        "extra": meta.extra,
    }
    if include_body:
        data["body"] = post.body
    return data


def index_to_dict(index: PostIndex, include_body: bool = True) -> dict[str, Any]:
    return {
        "posts": [post_to_dict(p, include_body) for p in index.posts],
        "tag_index": {tag: list(slugs) for tag, slugs in index.tag_index.items()},
        "tags": [
            {"tag": tag, "slug": tag_slug(tag), "count": count}
            for tag, count in index.tag_counts().items()
        ],
    }


def dump_index(index: PostIndex, include_body: bool = True) -> str:
    """Serialize the index; identical indexes give byte-identical text."""
    return json.dumps(index_to_dict(index, include_body), indent=2, ensure_ascii=False) + "\n"


def dump_errors(errors: Iterable[ErrorReport]) -> str:
    return json.dumps([e.model_dump(mode="json") for e in errors], indent=2, ensure_ascii=False) + "\n"


def build_markdown(post: Post) -> str:
    """Normalized single-post markdown: canonical frontmatter block + body.

    The output parses back to the same metadata, so split multi-post files can
    be republished one post per file.
    """
    meta = post.metadata
    fm: dict[str, Any] = {
        "title": meta.title,
        "date": meta.date.isoformat(),
        "excerpt": meta.excerpt,
        "tags": list(meta.tags),
        "featured": meta.featured,
    }
    if meta.cover_image:
        fm["coverImage"] = meta.cover_image
    fm.update(meta.extra)
    fm["slug"] = post.slug
    header = yaml.dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{header}---\n\n{post.body}\n"


def _clear_posts_dir(posts_dir: Path) -> None:
    """Drop post files left by a previous run; the output is rebuilt wholesale."""
    if not posts_dir.exists():
        return
    for p in posts_dir.iterdir():
        if p.is_file() and p.suffix in {".md", ".mdx"}:
            p.unlink()


def write_outputs(
    index: PostIndex,
    errors: list[ErrorReport],
    output_dir: Path,
    fmt: str = "md",
    ) -> list[Path]:
    """Write index.json, errors.json and posts/<slug>.<fmt>. Returns the written paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    posts_dir = output_dir / POSTS_DIR
    _clear_posts_dir(posts_dir)
    posts_dir.mkdir(parents=True, exist_ok=True)

    index_path = output_dir / INDEX_FILE
    errors_path = output_dir / ERRORS_FILE
    index_path.write_text(dump_index(index), encoding="utf-8")
    errors_path.write_text(dump_errors(errors), encoding="utf-8")

    written = [index_path, errors_path]
    for post in index.posts:
        post_path = posts_dir / f"{post.slug}.{fmt}"
        post_path.write_text(build_markdown(post), encoding="utf-8")
        written.append(post_path)
    return written
