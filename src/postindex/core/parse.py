"""Frontmatter extraction, metadata validation, and Post construction"""

import hashlib
import math
from typing import Any

import pydantic
import yaml

from postindex.core.errors import ValidationError
from postindex.core.models import LogicalDocument, Post, PostMetadata
from postindex.core.utils.slug import post_slug
from postindex.core.utils.tokens import extract_headings
from postindex.log import get_logger


FENCE = "---"
KNOWN_KEYS = {"title", "date", "excerpt", "tags", "featured", "coverImage"}
WORDS_PER_MINUTE = 200

log = get_logger(__name__)


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) for a document that opens with a --- fence.

    Leading blank lines (left over from splitting) and a BOM are skipped before
    the opening fence. Values are loaded without implicit typing: every scalar
    is a string and bracketed lists are lists of strings.
    Raises ValueError when a fence is missing or the block is not a YAML mapping.
    """
    lines = text.lstrip("\ufeff").splitlines(keepends=True)

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start == len(lines) or lines[start].strip() != FENCE:
        raise ValueError("missing frontmatter: document must start with a '---' fence (title and date are required)")

    end = next((i for i in range(start + 1, len(lines)) if lines[i].strip() == FENCE), None)
    if end is None:
        raise ValueError("unterminated frontmatter: no closing '---' fence")

    fm_text = "".join(lines[start + 1:end])
    try:
        fm = yaml.load(fm_text, Loader=yaml.BaseLoader) if fm_text.strip() else {}
    except yaml.YAMLError as e:
        raise ValueError(f"invalid YAML frontmatter: {e}") from e
    if fm is None:
        fm = {}
    if not isinstance(fm, dict):
        raise ValueError(f"invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")

    body = "".join(lines[end + 1:]).lstrip("\r\n").rstrip()
    return fm, body


def _describe(e: pydantic.ValidationError) -> str:
    parts = []
    for err in e.errors():
        field = ".".join(str(loc) for loc in err["loc"]) or "frontmatter"
        msg = err["msg"]
        if err["type"] == "missing":
            msg = "required field is missing"
        parts.append(f"{field}: {msg}")
    return "; ".join(parts)


def validate_metadata(fm: dict[str, Any]) -> PostMetadata:
    """Check required keys and types before building PostMetadata.

    Unknown keys are kept under `extra`. Raises ValueError with a readable
    summary of every failing field.
    """
    data = {k: v for k, v in fm.items() if k in KNOWN_KEYS}
    data["extra"] = {k: v for k, v in fm.items() if k not in KNOWN_KEYS}
    try:
        return PostMetadata.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValueError(_describe(e)) from e


def count_words(body: str) -> int:
    return len(body.split())


def reading_minutes(word_count: int) -> int:
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def parse_document(doc: LogicalDocument, parser_config: str = "gfm-like") -> Post:
    """Parse one LogicalDocument into a Post. Raises ValidationError when rejected."""
    try:
        fm, body = split_frontmatter(doc.raw_text)
        metadata = validate_metadata(fm)
    except ValueError as e:
        log.warning("parse.rejected", path=doc.source_path, ordinal=doc.ordinal, reason=str(e))
        raise ValidationError(doc.source_path, str(e), ordinal=doc.ordinal) from e

    words = count_words(body)
    return Post(
        metadata=metadata,
        body=body,
        slug=post_slug(doc.source_path, doc.ordinal),
        word_count=words,
        reading_time=reading_minutes(words),
        source_path=doc.source_path,
        ordinal=doc.ordinal,
        content_hash=hashlib.sha256(doc.raw_text.encode("utf-8")).hexdigest(),
        headings=extract_headings(body, parser_config),
    )
