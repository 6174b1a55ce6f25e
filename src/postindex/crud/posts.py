"""Post snapshot persistence: wholesale publish of a PostIndex, slug/tag lookup"""

import datetime as dt

from sqlalchemy import func
from sqlmodel import Session, select

from postindex.core.models import PostIndex
from postindex.core.utils.slug import normalize_tag
from postindex.crud.models import PostRow, PostTag, TagRow


def get_all_posts(session: Session) -> list[PostRow]:
    """Return every published post in index order (newest first)."""
    return list(session.exec(select(PostRow).order_by(PostRow.position)).all())


def get_by_slug(session: Session, slug: str) -> PostRow | None:
    """Return the post with the given slug, or None if not found."""
    return session.get(PostRow, slug)


def get_by_tag(session: Session, tag: str) -> list[PostRow]:
    """Return posts carrying tag (matched on its normalized form), newest first."""
    return list(session.exec(
        select(PostRow)
        .join(PostTag, PostTag.post_slug == PostRow.slug)
        .where(PostTag.tag_name == normalize_tag(tag))
        .order_by(PostRow.position)
    ).all())


def list_tags(session: Session) -> list[tuple[str, int]]:
    """Return (tag, post_count) pairs sorted by tag name."""
    rows = session.exec(
        select(PostTag.tag_name, func.count(PostTag.post_slug))
        .group_by(PostTag.tag_name)
        .order_by(PostTag.tag_name)
    ).all()
    return [(name, count) for name, count in rows]


def clear_snapshot(session: Session) -> None:
    """Delete all post, tag and link rows."""
    for model in (PostTag, PostRow, TagRow):
        for row in session.exec(select(model)).all():
            session.delete(row)
    session.flush()


def publish_index(session: Session, index: PostIndex, published_at: dt.datetime | None = None) -> int:
    """Replace the stored snapshot with index. Returns the number of posts written.

    Flushes but does not commit; caller controls the transaction.
    """
    published_at = published_at or dt.datetime.now()
    clear_snapshot(session)

    for name in index.tag_index:
        session.add(TagRow(name=name))
    session.flush()

    for position, post in enumerate(index.posts):
        meta = post.metadata
        session.add(PostRow(
            slug=post.slug,
            position=position,
            title=meta.title,
            date=meta.date,
            excerpt=meta.excerpt,
            featured=meta.featured,
            cover_image=meta.cover_image,
            body=post.body,
            word_count=post.word_count,
            reading_time=post.reading_time,
            source_path=post.source_path,
            ordinal=post.ordinal,
            content_hash=post.content_hash,
            tags=list(meta.tags),
            extra=meta.extra,
            published_at=published_at,
        ))
    session.flush()

    for post in index.posts:
        seen: list[str] = []
        for tag in post.metadata.tags:
            key = normalize_tag(tag)
            if key in seen:
                continue
            seen.append(key)
            session.add(PostTag(post_slug=post.slug, tag_name=key, position=len(seen) - 1))
    session.flush()

    return len(index.posts)
