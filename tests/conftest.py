"""Root test configuration: runtime artifact cleanup and loguru capture"""

import shutil
import sys
from pathlib import Path

import pytest
from loguru import logger


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_DIRS = ["dist"]


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove output directories created during the test session."""
    yield
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)


@pytest.fixture(autouse=True)
def restore_logging():
    """Reset loguru to a single stderr sink after tests that reconfigure it."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture(name="log_records")
def log_records_fixture():
    """Collect loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
