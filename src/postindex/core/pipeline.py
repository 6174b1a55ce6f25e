"""Pipeline orchestration: load -> split -> parse -> index, with a collected error report"""

from pathlib import Path
from typing import Iterable, Optional

from postindex.config import Settings
from postindex.core.errors import ErrorReport, ValidationError
from postindex.core.index import build_index
from postindex.core.load import DEFAULT_EXTENSIONS, load_blobs
from postindex.core.models import Post, PostIndex
from postindex.core.parse import parse_document
from postindex.core.split import separator_for, split_blob
from postindex.log import get_logger


log = get_logger(__name__)


def _drop_duplicate_slugs(posts: list[Post]) -> tuple[list[Post], list[ValidationError]]:
    """Keep the first post per slug in (source_path, ordinal) order; reject the rest."""
    kept: dict[str, Post] = {}
    rejected: list[ValidationError] = []
    for post in sorted(posts, key=lambda p: (p.source_path, p.ordinal)):
        first = kept.get(post.slug)
        if first is None:
            kept[post.slug] = post
            continue
        rejected.append(ValidationError(
            post.source_path,
            f"duplicate slug '{post.slug}' (already used by {first.source_path}#{first.ordinal})",
            ordinal=post.ordinal,
        ))
    return list(kept.values()), rejected


def run_pipeline(
    root: Path,
    separator: Optional[str] = None,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    workers: int = 1,
    read_timeout: Optional[float] = None,
    parser_config: str = "gfm-like",
    ) -> tuple[PostIndex, list[ErrorReport]]:
    """Build a fresh PostIndex from every post under root.

    Per-input failures never abort the run: unreadable files and rejected
    documents are returned as ErrorReport entries sorted by (path, ordinal).
    """
    blobs, load_errors = load_blobs(Path(root), extensions, workers=workers, timeout=read_timeout)
    failures = list(load_errors)

    posts: list[Post] = []
    for blob in blobs:
        for doc in split_blob(blob, separator):
            try:
                posts.append(parse_document(doc, parser_config))
            except ValidationError as e:
                failures.append(e)

    posts, duplicates = _drop_duplicate_slugs(posts)
    for e in duplicates:
        log.warning("parse.rejected", path=e.path, ordinal=e.ordinal, reason=e.message)
    failures.extend(duplicates)

    index = build_index(posts)
    errors = sorted((ErrorReport.from_exc(e) for e in failures), key=ErrorReport.sort_key)
    log.info("pipeline.done", root=str(root), posts=len(index.posts), errors=len(errors))
    return index, errors


def run_from_settings(settings: Settings, root: Optional[Path] = None) -> tuple[PostIndex, list[ErrorReport]]:
    """run_pipeline driven by Settings; root defaults to settings.content_root."""
    return run_pipeline(
        Path(root) if root is not None else Path(settings.content_root),
        separator=separator_for(settings.separator_token) if settings.separator_token else None,
        extensions=settings.extensions,
        workers=settings.workers,
        read_timeout=settings.read_timeout,
        parser_config=settings.parser_config,
    )
