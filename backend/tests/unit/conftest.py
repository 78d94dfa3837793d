"""Unit test configuration.

Unit tests never touch the network: HTTP clients get an AsyncMock session.
"""

from typing import Iterator

import pytest

from metrics.analysis import reset_all


@pytest.fixture(autouse=True)
def reset_metrics() -> Iterator[None]:
    """Start every test with empty analysis metrics."""
    reset_all()
    yield
    reset_all()
