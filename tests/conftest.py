from __future__ import annotations

import pytest


@pytest.fixture
def anyio_backend() -> str:
    # The sync engine schedules refetches with asyncio primitives.
    return "asyncio"
