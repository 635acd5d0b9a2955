from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import WorkspaceBuilder  # noqa: E402


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    """Keep tests away from the user's real workspace and settings."""

    monkeypatch.setenv("QUIZDRILL_DATA_HOME", str(tmp_path / "drill-home"))
    for key in (
        "QUIZDRILL_CONFIG",
        "QUIZDRILL_COUNT",
        "QUIZDRILL_PLAIN",
        "QUIZDRILL_SEED",
        "QUIZDRILL_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_quizdrill_logger():
    """Drop handlers installed by CLI runs so log capture keeps working."""

    yield
    logger = logging.getLogger("quizdrill")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
