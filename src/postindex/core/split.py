"""Document splitter: cut multi-post files on a literal separator marker"""

from typing import Iterable, Optional

from postindex.core.models import LogicalDocument, RawBlob
from postindex.log import get_logger


SEPARATOR_TEMPLATE = "<|RELATED_DOC_SEP-magic-{token}|>"

log = get_logger(__name__)


def separator_for(token: str) -> str:
    """Full separator marker for a corpus token."""
    if not token:
        raise ValueError("separator token must be a non-empty string")
    return SEPARATOR_TEMPLATE.format(token=token)


def split_segments(content: str, separator: Optional[str]) -> list[str]:
    """All N+1 raw segments for N exact-literal separator occurrences (empties kept)."""
    if not separator:
        return [content]
    return content.split(separator)


def split_blob(blob: RawBlob, separator: Optional[str] = None) -> list[LogicalDocument]:
    """Split a blob into LogicalDocuments.

    Whitespace-only segments (separator at either end, or two in a row) are
    dropped and logged as split anomalies; ordinals stay contiguous from 0.
    A blob with no meaningful segment at all comes back whole as document 0,
    so the parser rejects and reports it. Never fails.
    """
    documents: list[LogicalDocument] = []
    for position, segment in enumerate(split_segments(blob.content, separator)):
        if not segment.strip():
            log.info("split.anomaly", path=blob.path, segment=position, reason="empty segment dropped")
            continue
        documents.append(LogicalDocument(
            source_path=blob.path,
            ordinal=len(documents),
            raw_text=segment,
        ))
    if not documents:
        return [LogicalDocument(source_path=blob.path, ordinal=0, raw_text=blob.content)]
    return documents


def join_documents(documents: Iterable[LogicalDocument], separator: Optional[str]) -> str:
    """Reassemble documents in ordinal order; inverse of split_blob for the kept segments."""
    texts = [d.raw_text for d in sorted(documents, key=lambda d: d.ordinal)]
    return (separator or "").join(texts)
