"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from postindex.core.index import build_index
from postindex.core.models import LogicalDocument
from postindex.core.parse import parse_document
import postindex.crud.models  # noqa: F401


def _post(title: str, date: str, tags: str, path: str):
    text = f'---\ntitle: "{title}"\ndate: "{date}"\ntags: {tags}\n---\n\nSome body text here.\n'
    return parse_document(LogicalDocument(source_path=path, ordinal=0, raw_text=text))


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="index")
def index_fixture():
    """Three posts; 'DevOps'/'devops' and 'GitHub'/'github' variants across posts."""
    return build_index([
        _post("Docker Tips", "2026-01-10", '["DevOps", "Docker"]', "docker-tips.md"),
        _post("GitHub Actions", "2026-02-20", '["devops", "GitHub"]', "gh-actions.md"),
        _post("Open Source Life", "2026-01-30", '["github", "open-source"]', "oss.md"),
    ])
