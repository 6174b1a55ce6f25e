"""Change detection between a previously written index.json and a fresh build"""

import difflib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass
class IndexChanges:
    added:     list[str] = field(default_factory=list)
    removed:   list[str] = field(default_factory=list)
    changed:   list[str] = field(default_factory=list)
    unchanged: int = 0

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.changed)


def read_index(path: Path) -> Optional[dict[str, Any]]:
    """Load a previous index.json, or None when missing or unreadable."""
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    return data if isinstance(data, dict) else None


def _hashes(index: Optional[dict[str, Any]]) -> dict[str, Any]:
    """slug -> content_hash; entries without a string slug are skipped."""
    posts = (index or {}).get("posts")
    if not isinstance(posts, list):
        return {}
    return {
        p["slug"]: p.get("content_hash")
        for p in posts
        if isinstance(p, dict) and isinstance(p.get("slug"), str)
    }


def compare_indexes(old: Optional[dict[str, Any]], new: dict[str, Any]) -> IndexChanges:
    """Compare two index dicts (as produced by index_to_dict) slug by slug.

    A post counts as changed when its content hash differs.
    """
    old_hashes = _hashes(old)
    new_hashes = _hashes(new)

    changes = IndexChanges(
        added=sorted(set(new_hashes) - set(old_hashes)),
        removed=sorted(set(old_hashes) - set(new_hashes)),
    )
    for slug in sorted(set(new_hashes) & set(old_hashes)):
        if new_hashes[slug] != old_hashes[slug]:
            changes.changed.append(slug)
        else:
            changes.unchanged += 1
    return changes


def unified_diff(
    old: str,
    new: str,
    from_label: str = "previous",
    to_label: str = "current",
    context: int = 3,
    ) -> list[str]:
    """Return unified diff lines comparing old to new. Empty list if identical.

    Lines already include newlines; join with '' for display.
    """
    return list(difflib.unified_diff(
        old.splitlines(keepends=True),
        new.splitlines(keepends=True),
        fromfile=from_label,
        tofile=to_label,
        n=context,
    ))
