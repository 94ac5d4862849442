"""Test configuration and fixtures for the extractor test suite."""

import os
import sys
import logging
import pathlib
from typing import Iterable, Tuple

# Keep the developer's environment out of the settings under test
for _name in list(os.environ):
    if _name.startswith("HUNT_"):
        del os.environ[_name]
os.environ.setdefault("HUNT_LOG_LEVEL", "WARNING")

# Ensure tests can import from src/
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest

from hunt_summary.config import get_settings
from hunt_summary.hunt_logging import configure_logging
from tests.factories import MemorySnapshotStore, StepClock, build_dump


@pytest.fixture(scope="session", autouse=True)
def _configure_logging():
    """Route structlog through stdlib at the suite's WARNING level."""
    configure_logging(get_settings())
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_settings_and_logging():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    logging.getLogger().handlers.clear()


@pytest.fixture
def memory_store():
    return MemorySnapshotStore()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def write_dump(tmp_path):
    """Write a dump to tmp_path and return its path."""
    def _write(pairs: Iterable[Tuple[str, str]], name: str = "attributes.xml") -> pathlib.Path:
        path = tmp_path / name
        path.write_text(build_dump(pairs), encoding="utf-8")
        return path
    return _write
