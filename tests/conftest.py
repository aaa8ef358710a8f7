from __future__ import annotations

import pytest

from vacationmax import holidays, regions


@pytest.fixture(autouse=True)
def _fresh_lookup_caches():
    holidays.clear_cache()
    regions.clear_cache()
    yield
    holidays.clear_cache()
    regions.clear_cache()
