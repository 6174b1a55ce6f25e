"""Root test configuration: runtime artifact cleanup and logging reset"""

import logging
import shutil
from pathlib import Path

import pytest
import structlog


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["postindex.db", "test.db"]
_CLEANUP_DIRS = ["dist"]


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and output directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo CLI logging setup so later tests do not write to a closed CliRunner stream."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
