"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from postindex.config import Settings, load_config
from postindex.core.diff import compare_indexes, read_index, unified_diff
from postindex.core.errors import ErrorReport
from postindex.core.export import INDEX_FILE, dump_index, index_to_dict, write_outputs
from postindex.core.models import PostIndex
from postindex.core.pipeline import run_from_settings
from postindex.crud.database import init_db, make_engine, reset_db
from postindex.crud.posts import get_all_posts, get_by_tag, list_tags, publish_index
from postindex.log import setup_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config and configure logging with standard CLI error handling."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    setup_logging(settings)
    return settings


def _run(settings: Settings, path: Optional[str]) -> tuple[PostIndex, list[ErrorReport]]:
    root = Path(path) if path else Path(settings.content_root)
    if not root.exists():
        _fail(f"Content root not found: {root}")
    return run_from_settings(settings, root)


def _echo_errors(errors: list[ErrorReport]) -> None:
    """Print one line per rejected input."""
    for e in errors:
        where = e.path if e.ordinal is None else f"{e.path}#{e.ordinal}"
        typer.echo(f"  {e.kind.value}: {where}: {e.message}")


def _exit_if_strict(settings: Settings, errors: list[ErrorReport]) -> None:
    if settings.strict and errors:
        typer.echo(f"Strict mode: {len(errors)} input(s) rejected.", err=True)
        raise typer.Exit(1)


def build_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content directory or file (default: content_root)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="Post file format: md or mdx")] = None,
    token: Annotated[Optional[str], typer.Option("--separator-token", help="Multi-post separator token")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", help="Threads used to read files")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--no-strict", help="Exit 1 if any input is rejected")] = None,
    diff: Annotated[bool, typer.Option("--diff", help="Report and write changes against the previous index.json")] = False,
    ):
    """Run the pipeline and write index.json, errors.json and normalized posts."""
    settings = _settings(overrides={
        "output_dir": out, "output_format": fmt, "separator_token": token,
        "workers": workers, "strict": strict,
    })
    index, errors = _run(settings, path)
    output_dir = Path(settings.output_dir)

    previous = read_index(output_dir / INDEX_FILE) if diff else None
    old_text = (output_dir / INDEX_FILE).read_text(encoding="utf-8") if previous is not None else ""

    try:
        write_outputs(index, errors, output_dir, settings.output_format)
    except OSError as e:
        _fail("Writing output failed", e)

    _echo_errors(errors)
    typer.echo(
        f"Indexed {len(index.posts)} post(s), {len(index.tag_index)} tag(s) "
        f"to {output_dir}/ ({len(errors)} error(s))"
    )

    if diff:
        changes = compare_indexes(previous, index_to_dict(index))
        typer.echo(
            f"Changes - {len(changes.added)} added, {len(changes.changed)} changed, "
            f"{len(changes.removed)} removed, {changes.unchanged} unchanged"
        )
        for label, slugs in (("added", changes.added), ("changed", changes.changed), ("removed", changes.removed)):
            for slug in slugs:
                typer.echo(f"  {label}: {slug}")
        lines = unified_diff(old_text, dump_index(index), f"a/{INDEX_FILE}", f"b/{INDEX_FILE}")
        if lines:
            diff_dir = output_dir / "diffs"
            diff_dir.mkdir(parents=True, exist_ok=True)
            (diff_dir / "index.diff").write_text("".join(lines), encoding="utf-8")

    _exit_if_strict(settings, errors)


def check_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content directory or file (default: content_root)")] = None,
    token: Annotated[Optional[str], typer.Option("--separator-token", help="Multi-post separator token")] = None,
    ):
    """Validate every post without writing anything; exit 1 if any input is rejected."""
    settings = _settings(overrides={"separator_token": token})
    index, errors = _run(settings, path)
    _echo_errors(errors)
    typer.echo(f"Checked: {len(index.posts)} post(s) ok, {len(errors)} rejected")
    if errors:
        raise typer.Exit(1)


def publish_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content directory or file (default: content_root)")] = None,
    db_url: Annotated[Optional[str], typer.Option("--db-url", help="Database URL (or set POSTINDEX_DB_URL)")] = None,
    token: Annotated[Optional[str], typer.Option("--separator-token", help="Multi-post separator token")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--no-strict", help="Exit 1 if any input is rejected")] = None,
    ):
    """Run the pipeline and replace the database snapshot with the new index."""
    settings = _settings(overrides={"db_url": db_url, "separator_token": token, "strict": strict})
    index, errors = _run(settings, path)
    _echo_errors(errors)
    _exit_if_strict(settings, errors)

    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        with Session(engine) as session:
            count = publish_index(session, index)
            session.commit()
    except Exception as e:
        _fail("Publish failed", e)
    typer.echo(f"Published {count} post(s) to {settings.db_url} ({len(errors)} error(s))")


def list_cmd(
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only posts carrying this tag (any case)")] = None,
    ):
    """List published posts, newest first."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        rows = get_by_tag(session, tag) if tag else get_all_posts(session)
        lines = [f"{r.date.isoformat()}  {r.slug}  {r.title}" for r in rows]
    if not lines:
        typer.echo("No posts found." if not tag else f"No posts found for tag '{tag}'.")
        raise typer.Exit(1)
    for line in lines:
        typer.echo(line)


def tags_cmd():
    """List published tags with their post counts."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        tags = list_tags(session)
    if not tags:
        typer.echo("No tags found in database.")
        raise typer.Exit(1)
    for name, count in tags:
        typer.echo(f"{name} ({count})")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")
