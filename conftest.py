"""
Global pytest configuration and fixtures.
"""
import os
import pytest
from typing import Dict
from finance_client.config import FinanceClientConfig, reload_config


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'API_BASE_URL': 'http://backend.test/api',
        'API_TOKEN': 'test-token',
        'API_TIMEOUT': '5',
        'CACHE_TTL_SECONDS': '300',
        'ENABLE_RESPONSE_CACHE': 'true',
        'MAX_CONCURRENT_REQUESTS': '4',
        'ENVIRONMENT': 'testing',
        'DEBUG': 'true',
        'LOG_LEVEL': 'DEBUG'
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import finance_client.config.settings
    finance_client.config.settings._config = None

    yield test_env_vars

    # Clean up
    finance_client.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> FinanceClientConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def sample_invoices():
    """Invoice payloads as sent by the backend."""
    return [
        {'_id': 'inv1', 'rechnungNummer': 'RE-2024-001', 'status': 'bezahlt',
         'gesamtbetrag': 1000, 'rechnungsdatum': '2024-01-10',
         'bezahltAm': '2024-02-05T00:00:00.000Z'},
        {'_id': 'inv2', 'rechnungNummer': 'RE-2024-002', 'status': 'offen',
         'gesamtbetrag': 500, 'rechnungsdatum': '2024-02-01',
         'faelligkeitsdatum': '2024-12-31'},
    ]


@pytest.fixture
def sample_expenses():
    """Expense payloads as sent by the backend."""
    return [
        {'_id': 'exp1', 'beschreibung': 'Umzugshelfer', 'kategorie': 'Personal',
         'betrag': 300, 'datum': '2024-02-12'},
        {'_id': 'exp2', 'beschreibung': 'Kartons', 'kategorie': 'Material',
         'betrag': 200, 'datum': '2024-01-20'},
    ]


@pytest.fixture(autouse=True)
def cleanup_test_files():
    """Clean up any test files created during testing."""
    yield

    # Remove test coverage files in case they're created
    test_files = ['coverage.xml', '.coverage']
    for file in test_files:
        if os.path.exists(file):
            os.remove(file)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to tests under tests/unit/."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
