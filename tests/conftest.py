"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import pytest

from monzosplitwise.core import config as config_module
from tests.fixtures.synthetic_data import CURRENT_USER_ID, FLATMATE_IDS, make_group


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables and drop any cached configuration."""
    monkeypatch.setenv("MONZOSPLITWISE_ENV", "test")
    monkeypatch.setenv("MONZOSPLITWISE_DATA_DIR", str(tmp_path / "data"))

    # Mock sensitive environment variables
    monkeypatch.setenv("MONZO_ACCESS_TOKEN", "test-monzo-token")
    monkeypatch.setenv("SPLITWISE_ACCESS_TOKEN", "test-splitwise-token")
    monkeypatch.delenv("MONZO_ACCOUNT_ID", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)

    monkeypatch.setattr(config_module, "_config", None)


@pytest.fixture
def flatmates_group():
    """Three-person group including the current user."""
    return make_group(10, "Flat Mates", [CURRENT_USER_ID, *FLATMATE_IDS])


@pytest.fixture
def trip_group():
    """Two-person group including the current user."""
    return make_group(20, "Trip", [CURRENT_USER_ID, FLATMATE_IDS[0]])


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests for complete workflows"
    )
    config.addinivalue_line(
        "markers", "currency: Tests for currency handling and precision"
    )
    config.addinivalue_line(
        "markers", "monzo: Tests for Monzo integration"
    )
    config.addinivalue_line(
        "markers", "splitwise: Tests for Splitwise integration"
    )
    config.addinivalue_line(
        "markers", "reconcile: Tests for the reconciliation pipeline"
    )
