"""Pytest configuration and fixtures for j-dep-fixtures tests."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from j_dep_fixtures.config import FixtureConfig

DATA_DIR = Path(__file__).parent / "data"

# Named resources resolve against tests/data
os.environ["JDEP_FIXTURES_PATH"] = str(DATA_DIR)


@pytest.fixture
def data_config() -> FixtureConfig:
    return FixtureConfig(search_path=(DATA_DIR,))
