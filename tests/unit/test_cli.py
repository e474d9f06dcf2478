"""Unit tests for the privdns command line."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from privdns.cli import main, render_summary
from privdns.config_manager import ConfigManager
from privdns.private_dns import PrivateDnsError
from privdns.resource_group import ResourceGroupError
from privdns.sample import SampleResult
from privdns.vm_provisioning import VMDetails
from tests.mocks.azure_mock import RG_ID


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    """Never read the real ~/.privdns/config.toml."""
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_FILE", tmp_path / "absent.toml")


@pytest.fixture
def sample_result():
    return SampleResult(
        resource_group="PrivateDnsTemplateRG12345",
        resource_group_id=RG_ID,
        zone_name="privatednszone12345.com",
        vnet_name="vnet12345",
        vnet_id="vnet-id",
        link_name="link12345",
        nic_names=["nic1", "nic2"],
        vms=[
            VMDetails(name="vm001", resource_group="rg", location="eastus", size="Standard_D2s_v3"),
            VMDetails(name="vm002", resource_group="rg", location="eastus", size="Standard_D2s_v3"),
        ],
        vm1_public_ip="20.1.2.3",
        a_record_fqdn="vm001arecord.privatednszone12345.com.",
        ping_output="Reply from 10.10.2.4",
    )


@pytest.fixture
def azure_patches():
    """Patch credential, client and sample construction in the CLI module."""
    with (
        patch("privdns.cli.CredentialFactory.create_credential") as mock_credential,
        patch("privdns.cli.AzureClients.create") as mock_clients,
        patch("privdns.cli.PrivateDnsSample") as mock_sample_cls,
    ):
        yield mock_credential, mock_clients, mock_sample_cls


class TestMain:
    """Tests for the main command."""

    def test_success(self, sp_env_vars, azure_patches, sample_result):
        mock_credential, mock_clients, mock_sample_cls = azure_patches
        mock_sample_cls.return_value.run.return_value = sample_result

        result = CliRunner().invoke(main, [])

        assert result.exit_code == 0, result.output
        mock_clients.assert_called_once_with(
            mock_credential.return_value, sp_env_vars["SUBSCRIPTION_ID"]
        )
        mock_sample_cls.return_value.run.assert_called_once()
        mock_sample_cls.return_value.cleanup.assert_not_called()
        mock_clients.return_value.close.assert_called_once()
        assert "Private DNS Sample Resources" in result.output

    def test_location_option(self, sp_env_vars, azure_patches, sample_result):
        _, _, mock_sample_cls = azure_patches
        mock_sample_cls.return_value.run.return_value = sample_result

        result = CliRunner().invoke(main, ["--location", "westus2"])

        assert result.exit_code == 0, result.output
        config = mock_sample_cls.call_args.args[1]
        assert config.location == "westus2"

    def test_missing_credentials(self, monkeypatch, azure_patches, caplog):
        for name in ("CLIENT_ID", "CLIENT_SECRET", "TENANT_ID", "SUBSCRIPTION_ID"):
            monkeypatch.delenv(name, raising=False)
        _, _, mock_sample_cls = azure_patches

        with caplog.at_level("INFO"):
            result = CliRunner().invoke(main, ["--cleanup"])

        assert result.exit_code == 1
        assert "Missing environment variables" in caplog.text
        assert "No clean up is necessary" in caplog.text
        mock_sample_cls.assert_not_called()

    def test_run_failure_exits_nonzero(self, sp_env_vars, azure_patches, caplog):
        _, _, mock_sample_cls = azure_patches
        mock_sample_cls.return_value.run.side_effect = PrivateDnsError("Failed to create zone")

        with caplog.at_level("INFO"):
            result = CliRunner().invoke(main, [])

        assert result.exit_code == 1
        assert "Error: Failed to create zone" in caplog.text
        mock_sample_cls.return_value.cleanup.assert_not_called()

    def test_cleanup_after_failure(self, sp_env_vars, azure_patches):
        _, mock_clients, mock_sample_cls = azure_patches
        mock_sample_cls.return_value.run.side_effect = PrivateDnsError("boom")

        result = CliRunner().invoke(main, ["--cleanup"])

        assert result.exit_code == 1
        mock_sample_cls.return_value.cleanup.assert_called_once()
        mock_clients.return_value.close.assert_called_once()

    def test_cleanup_after_success(self, sp_env_vars, azure_patches, sample_result):
        _, _, mock_sample_cls = azure_patches
        mock_sample_cls.return_value.run.return_value = sample_result

        result = CliRunner().invoke(main, ["--cleanup"])

        assert result.exit_code == 0, result.output
        mock_sample_cls.return_value.cleanup.assert_called_once()

    def test_cleanup_failure_is_logged(self, sp_env_vars, azure_patches, sample_result, caplog):
        _, _, mock_sample_cls = azure_patches
        mock_sample_cls.return_value.run.return_value = sample_result
        mock_sample_cls.return_value.cleanup.side_effect = ResourceGroupError("delete timed out")

        with caplog.at_level("INFO"):
            result = CliRunner().invoke(main, ["--cleanup"])

        assert result.exit_code == 1
        assert "Cleanup failed: delete timed out" in caplog.text

    def test_error_message_sanitized(self, sp_env_vars, azure_patches, caplog):
        mock_credential, _, _ = azure_patches
        mock_credential.side_effect = RuntimeError("rejected client_secret=abc123")

        with caplog.at_level("INFO"):
            result = CliRunner().invoke(main, [])

        assert result.exit_code == 1
        assert "abc123" not in caplog.text

    def test_service_principal_logged_masked(
        self, sp_env_vars, azure_patches, sample_result, caplog
    ):
        _, _, mock_sample_cls = azure_patches
        mock_sample_cls.return_value.run.return_value = sample_result

        with caplog.at_level("DEBUG"):
            result = CliRunner().invoke(main, ["--verbose"])

        assert result.exit_code == 0, result.output
        assert "22222222-****" in caplog.text
        assert sp_env_vars["CLIENT_ID"] not in caplog.text
        assert sp_env_vars["CLIENT_SECRET"] not in caplog.text

    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestRenderSummary:
    """Tests for render_summary."""

    def test_table_lists_resources(self, sample_result):
        from rich.console import Console

        console = Console(record=True, width=200)
        render_summary(sample_result, console)
        text = console.export_text()

        assert "PrivateDnsTemplateRG12345" in text
        assert "privatednszone12345.com" in text
        assert "vm001" in text
        assert "vm002" in text
        assert "20.1.2.3" in text
