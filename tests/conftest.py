# tests/conftest.py
import os
import tempfile

# keep the durable store out of the working tree; must run before snapshop.config is imported
os.environ.setdefault("SNAPSHOP_DATA_DIR", tempfile.mkdtemp(prefix="snapshop-tests-"))

import pytest

from snapshop.database import MemoryStore


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def durable():
    return MemoryStore(prefix="snapshop_")


@pytest.fixture
def ephemeral():
    return MemoryStore(prefix="snapshop_")


@pytest.fixture
def clock():
    return FakeClock()
