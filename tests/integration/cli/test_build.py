"""Integration tests for the CLI commands (build, check, publish, list, tags)"""

import json

import pytest
from typer.testing import CliRunner

from postindex.cli.cli import app


TOKEN = "7f3a9c"
SEP = f"<|RELATED_DOC_SEP-magic-{TOKEN}|>"

runner = CliRunner()


def _post(title: str, date: str, tags: str = "[]", body: str = "Body text.") -> str:
    return f'---\ntitle: "{title}"\ndate: "{date}"\ntags: {tags}\n---\n\n{body}\n'


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    """Run every command from tmp_path with its own database and no stray env config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("POSTINDEX_DB_URL", f"sqlite:///{tmp_path}/test.db")
    for name in ("SEPARATOR_TOKEN", "STRICT", "OUTPUT_FORMAT", "CONTENT_ROOT"):
        monkeypatch.delenv(f"POSTINDEX_{name}", raising=False)
    posts = tmp_path / "posts"
    posts.mkdir()
    (posts / "a.md").write_text(_post("A", "2026-01-10", '["DevOps"]'), encoding="utf-8")
    (posts / "multi.md").write_text(
        SEP.join([_post("First", "2026-02-20", '["devops", "GitHub"]'), _post("Second", "2026-01-30", '["github"]')]),
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture(name="broken")
def broken_fixture(workspace):
    (workspace / "posts" / "broken.md").write_text("no frontmatter\n", encoding="utf-8")


def test_build_writes_index_and_posts(workspace):
    result = runner.invoke(app, ["build", "posts", "--separator-token", TOKEN, "--out-dir", "dist"])

    assert result.exit_code == 0, result.output
    assert "Indexed 3 post(s), 2 tag(s) to dist/ (0 error(s))" in result.stdout
    index = json.loads((workspace / "dist" / "index.json").read_text())
    assert [p["slug"] for p in index["posts"]] == ["multi", "multi-1", "a"]
    assert json.loads((workspace / "dist" / "errors.json").read_text()) == []
    assert sorted(p.name for p in (workspace / "dist" / "posts").iterdir()) == ["a.md", "multi-1.md", "multi.md"]


def test_build_mdx_format(workspace):
    result = runner.invoke(app, ["build", "posts", "--separator-token", TOKEN, "--format", "mdx"])
    assert result.exit_code == 0, result.output
    assert (workspace / "dist" / "posts" / "multi.mdx").exists()


def test_build_reports_errors(workspace, broken):
    result = runner.invoke(app, ["build", "posts", "--separator-token", TOKEN])

    assert result.exit_code == 0, result.output
    assert "ValidationError: broken.md#0: missing frontmatter" in result.stdout
    assert "(1 error(s))" in result.stdout
    errors = json.loads((workspace / "dist" / "errors.json").read_text())
    assert errors[0]["path"] == "broken.md"


def test_build_strict_exits_nonzero(workspace, broken):
    """--strict still writes outputs but exits 1 when any input was rejected."""
    result = runner.invoke(app, ["build", "posts", "--separator-token", TOKEN, "--strict"])
    assert result.exit_code == 1
    assert (workspace / "dist" / "index.json").exists()


def test_build_diff(workspace):
    runner.invoke(app, ["build", "posts", "--separator-token", TOKEN])
    (workspace / "posts" / "a.md").write_text(_post("A", "2026-01-10", '["DevOps"]', body="New body."), encoding="utf-8")

    result = runner.invoke(app, ["build", "posts", "--separator-token", TOKEN, "--diff"])

    assert result.exit_code == 0, result.output
    assert "Changes - 0 added, 1 changed, 0 removed, 2 unchanged" in result.stdout
    assert "  changed: a" in result.stdout
    assert "+" in (workspace / "dist" / "diffs" / "index.diff").read_text()


def test_build_missing_root(workspace):
    result = runner.invoke(app, ["build", "nope"])
    assert result.exit_code == 1
    assert "Content root not found" in result.output


def test_check(workspace):
    result = runner.invoke(app, ["check", "posts", "--separator-token", TOKEN])
    assert result.exit_code == 0, result.output
    assert "Checked: 3 post(s) ok, 0 rejected" in result.stdout
    assert not (workspace / "dist").exists()


def test_check_fails_on_rejected_input(workspace, broken):
    result = runner.invoke(app, ["check", "posts", "--separator-token", TOKEN])
    assert result.exit_code == 1
    assert "Checked: 3 post(s) ok, 1 rejected" in result.stdout


def test_publish_then_list_and_tags(workspace):
    result = runner.invoke(app, ["publish", "posts", "--separator-token", TOKEN])
    assert result.exit_code == 0, result.output
    assert "Published 3 post(s)" in result.stdout

    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [
        "2026-02-20  multi  First",
        "2026-01-30  multi-1  Second",
        "2026-01-10  a  A",
    ]

    result = runner.invoke(app, ["list", "--tag", "GitHub"])
    assert [line.split()[1] for line in result.stdout.splitlines()] == ["multi", "multi-1"]

    result = runner.invoke(app, ["tags"])
    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["devops (2)", "github (2)"]


def test_list_empty_database(workspace):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert "No posts found." in result.stdout


def test_init_reset(workspace):
    result = runner.invoke(app, ["init", "--reset"])
    assert result.exit_code == 0, result.output
    assert "Database initialized at:" in result.stdout
