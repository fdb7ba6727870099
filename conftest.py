import shutil
from pathlib import Path

import pytest

from backend import sessions, storage

TEST_DATA_DIR = Path("data-tests")


@pytest.fixture(autouse=True)
def clean_test_data():
    """Wipe and re-init data-tests/ before every test."""
    if TEST_DATA_DIR.exists():
        shutil.rmtree(TEST_DATA_DIR)
    storage.init_storage(TEST_DATA_DIR)
    sessions.clear()
    yield
    # leave data-tests around after tests for inspection; CI can ignore it


class FixedRandom:
    """Random source returning a fixed sequence of samples (last one repeats)."""

    def __init__(self, *samples: float) -> None:
        self._samples = list(samples) or [0.0]

    def random(self) -> float:
        if len(self._samples) > 1:
            return self._samples.pop(0)
        return self._samples[0]


@pytest.fixture
def fixed_random():
    return FixedRandom
