from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.site_builder import SiteBuilder


@pytest.fixture
def site_builder(tmp_path: Path) -> SiteBuilder:
    """Provide a reusable source tree rooted at the pytest tmp_path."""
    return SiteBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _propagate_sitegen_logs():
    """Keep sitegen records visible to caplog even after configure_logging ran."""
    logger = logging.getLogger("sitegen")
    previous = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = previous
