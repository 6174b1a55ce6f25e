"""Source loader: file discovery and RawBlob reads with partial-failure semantics"""

import threading
import time
from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, wait
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from postindex.core.errors import LoadError
from postindex.core.models import RawBlob
from postindex.log import get_logger


DEFAULT_EXTENSIONS = (".md",)

log = get_logger(__name__)


def _matches(path: Path, extensions: Iterable[str]) -> bool:
    return path.suffix.lower() in {e.lower() for e in extensions}


def source_path(path: Path, root: Path) -> str:
    """POSIX path of a file relative to the content root ('a.md', 'sub/b.md')."""
    if root.is_file() or path == root:
        return path.name
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def discover_files(root: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> Iterator[Path]:
    """Lazily yield matching files under root (or root itself if it is a matching file).

    Order is filesystem enumeration order; callers sort downstream.
    """
    extensions = tuple(extensions)
    if root.is_file():
        if _matches(root, extensions):
            yield root
        return
    for p in root.rglob('*'):
        if p.is_file() and _matches(p, extensions):
            yield p


def read_blob(path: Path, root: Path) -> RawBlob:
    """Read one UTF-8 file. Raises LoadError on any I/O or decoding failure."""
    rel = source_path(path, root)
    try:
        content = path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise LoadError(rel, f"not valid UTF-8: {e.reason} at byte {e.start}") from e
    except OSError as e:
        raise LoadError(rel, f"cannot read file: {e.strerror or e}") from e
    return RawBlob(path=rel, content=content)


def iter_blobs(root: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> Iterator[Union[RawBlob, LoadError]]:
    """Lazily read files one at a time, yielding a RawBlob or the LoadError for each."""
    for p in discover_files(root, extensions):
        try:
            yield read_blob(p, root)
        except LoadError as e:
            log.warning("source.skipped", path=e.path, reason=e.message)
            yield e


def _start_read(path: Path, root: Path) -> Future:
    """Read one file on a daemon thread; the Future resolves to a RawBlob or LoadError.

    A read that never returns only pins its own thread, and does not keep the
    interpreter alive at exit.
    """
    future: Future = Future()

    def work() -> None:
        try:
            future.set_result(read_blob(path, root))
        except Exception as e:
            future.set_exception(e)

    threading.Thread(target=work, name=f"postindex-load-{path.name}", daemon=True).start()
    return future


def load_blobs(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    workers: int = 1,
    timeout: Optional[float] = None,
    ) -> tuple[list[RawBlob], list[LoadError]]:
    """Read every matching file with at most `workers` reads in flight.

    Each read gets `timeout` seconds measured from when it starts. A read past
    its deadline is reported as a LoadError and its slot is handed to the next
    file, so one stuck file never delays or fails the others. Returns
    (blobs, errors) and never raises for per-file failures.
    """
    root = Path(root)
    if not root.exists():
        return [], [LoadError(root.as_posix(), "content root does not exist")]

    paths = list(discover_files(root, extensions))
    queued = deque(paths)
    running: dict[Future, tuple[Path, float]] = {}
    blobs: list[RawBlob] = []
    errors: list[LoadError] = []

    while queued or running:
        while queued and len(running) < max(1, workers):
            p = queued.popleft()
            running[_start_read(p, root)] = (p, time.monotonic())

        wait_for = None
        if timeout is not None:
            first_deadline = min(started for _, started in running.values()) + timeout
            wait_for = max(0.0, first_deadline - time.monotonic())
        done, _ = wait(running, timeout=wait_for, return_when=FIRST_COMPLETED)

        for future in done:
            running.pop(future)
            try:
                blobs.append(future.result())
            except LoadError as e:
                errors.append(e)

        if timeout is not None:
            now = time.monotonic()
            for future, (p, started) in list(running.items()):
                if now - started >= timeout:
                    del running[future]
                    errors.append(LoadError(source_path(p, root), f"read timed out after {timeout}s"))

    for e in errors:
        log.warning("source.skipped", path=e.path, reason=e.message)
    log.info("source.loaded", root=str(root), files=len(paths), loaded=len(blobs), skipped=len(errors))
    return blobs, errors
