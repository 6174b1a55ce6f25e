"""Database table definitions for the published post index snapshot"""

import datetime as dt
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class TagRow(SQLModel, table=True):
    """A normalized tag key from the tag index"""
    __tablename__ = "tags"
    name: str = Field(primary_key=True)


class PostTag(SQLModel, table=True):
    """Many-to-many relationship between posts and normalized tags"""
    __tablename__ = "post_tags"
    post_slug: str = Field(foreign_key="posts.slug", primary_key=True)
    tag_name: str = Field(foreign_key="tags.name", primary_key=True)
    position: int = Field(..., nullable=False, description="Position of the tag in the post's frontmatter")


class PostRow(SQLModel, table=True):
    """One indexed post; position is its place in the date-descending index order"""
    __tablename__ = "posts"
    slug: str = Field(primary_key=True)
    position: int = Field(..., index=True, nullable=False)
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    date: dt.date = Field(..., index=True, nullable=False)
    excerpt: str = Field(default="", sa_column=Column(Text, nullable=False))
    featured: bool = Field(default=False, nullable=False)
    cover_image: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    body: str = Field(..., sa_column=Column(Text, nullable=False))
    word_count: int = Field(..., nullable=False)
    reading_time: int = Field(..., nullable=False)
    source_path: str = Field(..., sa_column=Column(Text, nullable=False))
    ordinal: int = Field(default=0, nullable=False)
    content_hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    extra: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    published_at: dt.datetime = Field(default_factory=dt.datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
