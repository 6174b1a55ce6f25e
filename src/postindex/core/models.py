"""Data models for the load -> split -> parse -> index pipeline"""

import datetime as dt
import re
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from postindex.core.utils.slug import normalize_tag


DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
BOOL_TOKENS = {"true": True, "false": False}


@dataclass(frozen=True)
class RawBlob:
    """One loaded source file. path is relative to the content root (POSIX)."""
    path:    str
    content: str


@dataclass(frozen=True)
class LogicalDocument:
    """One post's worth of text cut from a RawBlob."""
    source_path: str
    ordinal:     int        # 0-based, contiguous after empty segments are dropped
    raw_text:    str


class PostMetadata(BaseModel):
    """Validated frontmatter. Instances are never partially valid."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title:       str = Field(..., min_length=1)
    date:        dt.date
    excerpt:     str = ""
    tags:        tuple[str, ...] = ()
    featured:    bool = False
    cover_image: Optional[str] = Field(default=None, alias="coverImage")
    extra:       dict[str, Any] = Field(default_factory=dict)   # unknown keys, passed through

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("date", mode="before")
    @classmethod
    def _strict_date(cls, value: Any) -> Any:
        """Only YYYY-MM-DD is accepted; no best-effort guessing."""
        if isinstance(value, dt.datetime):
            raise ValueError("expected a calendar date (YYYY-MM-DD), got a timestamp")
        if isinstance(value, dt.date):
            return value
        if not isinstance(value, str) or not DATE_RE.match(value.strip()):
            raise ValueError(f"expected a calendar date (YYYY-MM-DD), got {value!r}")
        return dt.date.fromisoformat(value.strip())

    @field_validator("excerpt", mode="before")
    @classmethod
    def _strip_excerpt(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("cover_image", mode="before")
    @classmethod
    def _strip_cover_image(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, value: Any) -> Any:
        """Strip entries, drop empty ones and exact duplicates (first occurrence wins)."""
        if value is None or value == "":
            return ()
        if not isinstance(value, (list, tuple)):
            raise ValueError("tags must be a bracketed list of strings")
        cleaned: list[str] = []
        for tag in value:
            if not isinstance(tag, str):
                raise ValueError(f"tag must be a string, got {type(tag).__name__}")
            tag = tag.strip()
            if tag and tag not in cleaned:
                cleaned.append(tag)
        return tuple(cleaned)

    @field_validator("featured", mode="before")
    @classmethod
    def _bool_token(cls, value: Any) -> Any:
        if value is None or value == "" or isinstance(value, bool):
            return bool(value)
        if isinstance(value, str) and value.strip().lower() in BOOL_TOKENS:
            return BOOL_TOKENS[value.strip().lower()]
        raise ValueError(f"featured must be true or false, got {value!r}")


class Heading(BaseModel):
    """A body heading, for tables of contents."""
    model_config = ConfigDict(frozen=True)

    level:  int
    text:   str
    anchor: str


class Post(BaseModel):
    """A fully parsed, validated post. Owned by the PostIndex."""
    model_config = ConfigDict(frozen=True)

    metadata:     PostMetadata
    body:         str
    slug:         str
    word_count:   int
    reading_time: int                       # minutes, never below 1
    source_path:  str
    ordinal:      int = 0
    content_hash: str                       # sha256 of the logical document text
    headings:     tuple[Heading, ...] = ()

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def date(self) -> dt.date:
        return self.metadata.date

    @property
    def excerpt(self) -> str:
        return self.metadata.excerpt

    @property
    def tags(self) -> tuple[str, ...]:
        return self.metadata.tags

    @property
    def featured(self) -> bool:
        return self.metadata.featured


class PostIndex(BaseModel):
    """Posts sorted by date (newest first) plus the derived tag -> slugs mapping.

    Built only by core.index.build_index; rebuilt wholesale on every run.
    """
    model_config = ConfigDict(frozen=True)

    posts:     tuple[Post, ...] = ()
    tag_index: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.posts)

    def get(self, slug: str) -> Optional[Post]:
        """Return the post with the given slug, or None."""
        for post in self.posts:
            if post.slug == slug:
                return post
        return None

    def by_tag(self, tag: str) -> list[Post]:
        """Posts carrying tag (any case), newest first."""
        slugs = set(self.tag_index.get(normalize_tag(tag), ()))
        return [p for p in self.posts if p.slug in slugs]

    def tags(self) -> list[str]:
        return sorted(self.tag_index)

    def tag_counts(self) -> dict[str, int]:
        return {tag: len(self.tag_index[tag]) for tag in self.tags()}

    def featured(self) -> list[Post]:
        return [p for p in self.posts if p.featured]
