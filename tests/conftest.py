from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable frontend tree builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch):
    for key in ("GQLSCAN_API_KEY", "OPENROUTER_API_KEY", "GQLSCAN_MODEL", "GQLSCAN_BASE_URL"):
        monkeypatch.delenv(key, raising=False)
    yield
    # configure_logging() detaches the package logger from the root; undo it so caplog keeps working.
    logger = logging.getLogger("gqlscan")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
