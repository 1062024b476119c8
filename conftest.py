import shutil
from pathlib import Path

import pytest

from survivalfox.storage import LocalStorage

TEST_DATA_DIR = Path("data-tests")


@pytest.fixture(autouse=True)
def clean_test_data():
    """Wipe and re-create data-tests/ before every test."""
    if TEST_DATA_DIR.exists():
        shutil.rmtree(TEST_DATA_DIR)
    TEST_DATA_DIR.mkdir(parents=True)
    yield
    # leave data-tests around after tests for inspection; CI can ignore it


@pytest.fixture
def local() -> LocalStorage:
    return LocalStorage(TEST_DATA_DIR)
