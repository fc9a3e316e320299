import os
import sys

import pytest

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(project_root)

from tests.factories import make_png


@pytest.fixture(scope="session")
def coded_png() -> bytes:
    """256x256 tile whose pixels encode their own (x, y) in r/g."""
    return make_png(256)


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    # keep a developer's TILE_QUERY_CONFIG from leaking into tests
    monkeypatch.delenv("TILE_QUERY_CONFIG", raising=False)
