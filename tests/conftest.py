"""
Test configuration and utilities
"""

import pytest
import logging
from datetime import datetime, timezone

from cognitive_memory.config import ConfigManager


# Fixed reference clock so recency and decay assertions are exact
NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup logging for tests"""
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@pytest.fixture
def now():
    """Reference time shared by a test's scorers"""
    return NOW


@pytest.fixture
def config():
    """Configuration built from defaults, ignoring any local .env file"""
    return ConfigManager(env_file_path="/nonexistent/.env")
