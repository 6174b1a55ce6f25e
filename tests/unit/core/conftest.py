"""Shared fixtures for core unit tests"""

import pytest

from postindex.core.models import LogicalDocument
from postindex.core.parse import parse_document


TOKEN = "7f3a9c"
SEP = f"<|RELATED_DOC_SEP-magic-{TOKEN}|>"


def post_text(title: str, date: str, tags: str = "[]", body: str = "Body text.", **extra) -> str:
    """Frontmatter document in the corpus format."""
    lines = ["---", f'title: "{title}"', f'date: "{date}"', f"tags: {tags}"]
    lines += [f"{k}: {v}" for k, v in extra.items()]
    lines += ["---", "", body, ""]
    return "\n".join(lines)


def make_post(title: str = "A", date: str = "2026-01-01", tags: str = "[]",
              source_path: str = "a.md", ordinal: int = 0, **extra):
    """Parse a synthetic document straight into a Post."""
    doc = LogicalDocument(source_path=source_path, ordinal=ordinal, raw_text=post_text(title, date, tags, **extra))
    return parse_document(doc)


SAMPLE_POST = """\
---
title: "Why I Self-Host Everything 🚀"
date: "2026-02-20"
excerpt: "Real talk: the cloud is someone else's computer."
tags: ["DevOps", "open-source", "Homelab"]
featured: true
coverImage: "/images/self-host.png"
author: "kp"
---

# Why I Self-Host Everything 🚀

Here's the deal.

## The catch

It takes **time**.

---

**Bottom line:** do it anyway.
"""


@pytest.fixture(name="separator")
def separator_fixture():
    return SEP


@pytest.fixture(name="post_text")
def post_text_fixture():
    return post_text


@pytest.fixture(name="make_post")
def make_post_fixture():
    return make_post


@pytest.fixture(name="sample_doc")
def sample_doc_fixture():
    return LogicalDocument(source_path="2026/self-host.md", ordinal=0, raw_text=SAMPLE_POST)


@pytest.fixture(name="content_root")
def content_root_fixture(tmp_path):
    """A small content directory: one single-post file, one three-post file, one broken file."""
    root = tmp_path / "posts"
    root.mkdir()
    (root / "a.md").write_text(post_text("A", "2026-01-10", '["DevOps"]'), encoding="utf-8")
    (root / "multi.md").write_text(
        SEP.join([
            post_text("First", "2026-02-20", '["devops", "GitHub"]'),
            "\n" + post_text("Second", "2026-01-30", '["github"]'),
            "\n" + post_text("Third", "2026-01-30"),
        ]),
        encoding="utf-8",
    )
    (root / "broken.md").write_text("# No frontmatter here\n\nJust prose.\n", encoding="utf-8")
    (root / "notes.txt").write_text("ignored", encoding="utf-8")
    return root
