"""Shared fixtures: every test starts with an empty value pool."""

import pytest

from blaze_solid.pool import reset_pool
from blaze_solid.undefined import clear_undefined_history


@pytest.fixture(autouse=True)
def fresh_pool():
    pool = reset_pool()
    clear_undefined_history()
    yield pool
    clear_undefined_history()


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running tests")
