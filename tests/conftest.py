from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Drop logging configuration bound to a CliRunner's temporary stderr."""
    yield
    structlog.reset_defaults()
