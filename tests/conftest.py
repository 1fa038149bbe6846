from __future__ import annotations

import sys
from pathlib import Path

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from dbhotel.core.hotel import DatabaseHotelService  # noqa: E402
from dbhotel.core.registry import DatabaseHotelAdmin  # noqa: E402


@pytest.fixture
def hotel():
    """Build a service over the given fake instances and external manager."""

    def _build(*instances, external=None, max_workers=None) -> DatabaseHotelService:
        admin = DatabaseHotelAdmin(instances, external)
        return DatabaseHotelService(admin, max_workers=max_workers)

    return _build
