"""Unit tests for core/diff.py"""

from postindex.core.diff import compare_indexes, read_index, unified_diff
from postindex.core.export import dump_index, index_to_dict
from postindex.core.index import build_index


def test_compare_indexes_detects_changes(make_post):
    old = index_to_dict(build_index([
        make_post("Keep", source_path="keep.md"),
        make_post("Edit", source_path="edit.md"),
        make_post("Gone", source_path="gone.md"),
    ]))
    new = index_to_dict(build_index([
        make_post("Keep", source_path="keep.md"),
        make_post("Edited", source_path="edit.md"),
        make_post("Fresh", source_path="fresh.md"),
    ]))
    changes = compare_indexes(old, new)
    assert changes.added == ["fresh"]
    assert changes.removed == ["gone"]
    assert changes.changed == ["edit"]
    assert changes.unchanged == 1
    assert changes.has_changes


def test_compare_indexes_without_previous(make_post):
    changes = compare_indexes(None, index_to_dict(build_index([make_post()])))
    assert changes.added == ["a"]


def test_read_index(tmp_path, make_post):
    path = tmp_path / "index.json"
    assert read_index(path) is None
    path.write_text("{not json")
    assert read_index(path) is None
    path.write_text(dump_index(build_index([make_post()])))
    assert read_index(path)["posts"][0]["slug"] == "a"


def test_unified_diff():
    assert unified_diff("a\n", "a\n") == []
    lines = unified_diff("a\nb\n", "a\nc\n", "old", "new")
    assert lines[0].startswith("--- old")
    assert "-b\n" in lines and "+c\n" in lines


def test_compare_indexes_skips_malformed_entries(make_post):
    """Hand-edited or old index.json entries without a slug are ignored."""
    old = {"posts": [{"title": "no slug"}, "junk", {"slug": "a", "content_hash": "stale"}]}
    changes = compare_indexes(old, index_to_dict(build_index([make_post()])))
    assert changes.changed == ["a"]
    assert changes.removed == []
    assert compare_indexes({"posts": "nope"}, {"posts": []}).has_changes is False
