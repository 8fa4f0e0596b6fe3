"""Test configuration — ensure trainload modules are importable."""
import sys
from pathlib import Path

import pytest

# Add project root to path so `from trainload.xxx import` works
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def catalog():
    from trainload.catalog import default_catalog
    return default_catalog()
