"""
Pytest configuration and shared fixtures for the pgstatprof test suite.

This module provides common fixtures, test doubles and configuration
for all test modules in the project.
"""

import io
import sys
from pathlib import Path
from typing import List, Sequence

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pgstatprof.collectors.base import AbstractStatementSource, RawStatement  # noqa: E402
from pgstatprof.validation import DataSourceError  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Test Doubles
# ============================================================================


class ScriptedStatementSource(AbstractStatementSource):
    """
    Statement source replaying a fixed list of batches.

    Each poll returns the next batch of statement texts as active statements.
    Once the script is exhausted it either raises DataSourceError or asks the
    attached profiler to shut down, depending on `fail_when_exhausted`.
    """

    def __init__(self, batches: Sequence[Sequence[str]], fail_when_exhausted: bool = False):
        self.batches: List[List[str]] = [list(batch) for batch in batches]
        self.fail_when_exhausted = fail_when_exhausted
        self.polls = 0
        self.connected = False
        self.closed = False
        self.profiler = None

    def connect(self) -> None:
        self.connected = True

    def close(self) -> None:
        self.closed = True

    def list_active_statements(self) -> List[RawStatement]:
        index = self.polls
        self.polls += 1
        if index >= len(self.batches):
            if self.fail_when_exhausted:
                raise DataSourceError("server went away")
            return []
        batch = self.batches[index]
        if self.polls == len(self.batches) and self.profiler is not None:
            self.profiler.request_shutdown()
        return [RawStatement(state="active", text=text) for text in batch]


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def output_stream():
    """In-memory stream capturing reports."""
    return io.StringIO()


@pytest.fixture
def scripted_source():
    """Factory for ScriptedStatementSource instances."""
    return ScriptedStatementSource


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "connection": {
            "host": "db.example.com",
            "port": 5433,
            "user": "profiler",
            "password": "secret",
            "database": "app",
        },
        "profiler": {
            "interval_seconds": 0.5,
            "delay": 2,
            "top": 5,
            "diff": True,
            "normalize": False,
            "window_size": 10,
        },
    }


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    yield

    from pgstatprof.config import clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(None)
