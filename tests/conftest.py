from __future__ import annotations

import pytest

from citylayout.generation import AssetCatalog


@pytest.fixture
def catalog() -> AssetCatalog:
    """Placeholder handles for every category, three per building/prop."""
    return AssetCatalog.placeholder()
