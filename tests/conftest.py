from __future__ import annotations

import sys
from pathlib import Path

import pytest

# uv/pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tests.unit._fakes import FakeClock  # noqa: E402
from wargamer.core.cache import CacheManager  # noqa: E402


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def caches(clock: FakeClock) -> CacheManager:
    """An isolated cache registry driven by the fake clock."""

    return CacheManager(clock=clock)
