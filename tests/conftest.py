"""
Shared test fixtures and configuration for privdns tests.

This module provides common fixtures used across all test types:
- Mock Azure management clients
- Service principal environment
- Sample configuration
- Progress display writing to a buffer
"""

import io
from unittest.mock import MagicMock

import pytest

from privdns.azure_clients import AzureClients
from privdns.config_manager import SampleConfig
from privdns.modules.progress import ProgressDisplay
from tests.mocks.azure_mock import SUBSCRIPTION_ID

TENANT_ID = "11111111-1111-1111-1111-111111111111"
CLIENT_ID = "22222222-2222-2222-2222-222222222222"

# ============================================================================
# AZURE FIXTURES
# ============================================================================


@pytest.fixture
def mock_clients():
    """AzureClients bundle with every management client mocked."""
    return AzureClients(
        subscription_id=SUBSCRIPTION_ID,
        resource=MagicMock(),
        network=MagicMock(),
        compute=MagicMock(),
        private_dns=MagicMock(),
    )


@pytest.fixture
def sp_environ():
    """Complete service principal environment."""
    return {
        "CLIENT_ID": CLIENT_ID,
        "CLIENT_SECRET": "super-secret-value",
        "TENANT_ID": TENANT_ID,
        "SUBSCRIPTION_ID": SUBSCRIPTION_ID,
    }


@pytest.fixture
def sp_env_vars(monkeypatch, sp_environ):
    """Export the service principal environment for the test."""
    for key, value in sp_environ.items():
        monkeypatch.setenv(key, value)
    return sp_environ


# ============================================================================
# CONFIG FIXTURES
# ============================================================================


@pytest.fixture
def sample_config():
    """Default sample configuration."""
    return SampleConfig()


@pytest.fixture
def quiet_progress():
    """ProgressDisplay writing into a buffer."""
    return ProgressDisplay(total_steps=10, output_file=io.StringIO())


@pytest.fixture
def temp_config_file(tmp_path):
    """Write a TOML config file and return its path."""

    def _write(content: str):
        path = tmp_path / "config.toml"
        path.write_text(content)
        return path

    return _write
