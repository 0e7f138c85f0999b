from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.release_builder import ReleaseRepoBuilder


@pytest.fixture
def release_repo(tmp_path: Path) -> ReleaseRepoBuilder:
    """Provide a release checkout builder rooted at the pytest tmp_path."""
    return ReleaseRepoBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_konfluxgen_logger() -> Iterator[None]:
    # configure_logging() disables propagation, which hides records from caplog.
    yield
    logger = logging.getLogger("konfluxgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
