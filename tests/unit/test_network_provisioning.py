"""Unit tests for network_provisioning module."""

import pytest
from azure.core.exceptions import HttpResponseError

from privdns.network_provisioning import NetworkProvisioner, NetworkProvisioningError
from tests.mocks.azure_mock import network_id, poller, resource

SUBNETS = {"default": "10.10.1.0/24", "subnet1": "10.10.2.0/24", "subnet2": "10.10.3.0/24"}


@pytest.fixture
def provisioner(mock_clients):
    return NetworkProvisioner(mock_clients, "test-rg", "eastus")


def fake_vnet():
    return resource(
        name="vnet1",
        id=network_id("virtualNetworks", "vnet1"),
        address_space=resource(address_prefixes=["10.10.0.0/16"]),
        subnets=[resource(name=name) for name in SUBNETS],
    )


class TestCreateVirtualNetwork:
    """Tests for NetworkProvisioner.create_virtual_network."""

    def test_three_subnets(self, provisioner, mock_clients):
        vnets = mock_clients.network.virtual_networks
        vnets.begin_create_or_update.return_value = poller(fake_vnet())

        vnet = provisioner.create_virtual_network("vnet1", "10.10.0.0/16", SUBNETS)

        vnets.begin_create_or_update.assert_called_once_with(
            "test-rg",
            "vnet1",
            {
                "location": "eastus",
                "address_space": {"address_prefixes": ["10.10.0.0/16"]},
                "subnets": [
                    {"name": "default", "address_prefix": "10.10.1.0/24"},
                    {"name": "subnet1", "address_prefix": "10.10.2.0/24"},
                    {"name": "subnet2", "address_prefix": "10.10.3.0/24"},
                ],
            },
        )
        assert vnet.id == network_id("virtualNetworks", "vnet1")
        assert vnet.subnet_names == ["default", "subnet1", "subnet2"]
        assert vnet.address_prefixes == ["10.10.0.0/16"]

    def test_failure(self, provisioner, mock_clients):
        mock_clients.network.virtual_networks.begin_create_or_update.side_effect = (
            HttpResponseError(message="InUseSubnetCannotBeDeleted")
        )

        with pytest.raises(NetworkProvisioningError, match="Failed to create virtual network vnet1"):
            provisioner.create_virtual_network("vnet1", "10.10.0.0/16", SUBNETS)


class TestSubnetsAndPublicIps:
    """Tests for subnet lookup and public IPs."""

    def test_get_subnet_id(self, provisioner, mock_clients):
        subnet_id = network_id("virtualNetworks", "vnet1/subnets/subnet1")
        mock_clients.network.subnets.get.return_value = resource(id=subnet_id)

        assert provisioner.get_subnet_id("vnet1", "subnet1") == subnet_id
        mock_clients.network.subnets.get.assert_called_once_with("test-rg", "vnet1", "subnet1")

    def test_get_subnet_id_not_found(self, provisioner, mock_clients):
        mock_clients.network.subnets.get.side_effect = HttpResponseError(message="NotFound")

        with pytest.raises(NetworkProvisioningError, match="Failed to read subnet subnet9"):
            provisioner.get_subnet_id("vnet1", "subnet9")

    def test_create_public_ip(self, provisioner, mock_clients):
        pip_id = network_id("publicIPAddresses", "pip1")
        pips = mock_clients.network.public_ip_addresses
        pips.begin_create_or_update.return_value = poller(resource(id=pip_id))

        assert provisioner.create_public_ip("pip1") == pip_id
        parameters = pips.begin_create_or_update.call_args.args[2]
        assert parameters["public_ip_allocation_method"] == "Static"
        assert parameters["location"] == "eastus"

    def test_get_public_ip_address(self, provisioner, mock_clients):
        mock_clients.network.public_ip_addresses.get.return_value = resource(
            ip_address="20.1.2.3"
        )

        assert provisioner.get_public_ip_address("pip1") == "20.1.2.3"
        mock_clients.network.public_ip_addresses.get.assert_called_once_with("test-rg", "pip1")


class TestCreateNetworkInterface:
    """Tests for NetworkProvisioner.create_network_interface."""

    def _nic(self, name, private_ip="10.10.2.4"):
        return resource(
            name=name,
            id=network_id("networkInterfaces", name),
            ip_configurations=[resource(private_ip_address=private_ip)],
        )

    def test_nic_with_public_ip(self, provisioner, mock_clients):
        """Public IP is created first and attached to the NIC."""
        pip_id = network_id("publicIPAddresses", "pip1")
        mock_clients.network.public_ip_addresses.begin_create_or_update.return_value = poller(
            resource(id=pip_id)
        )
        nics = mock_clients.network.network_interfaces
        nics.begin_create_or_update.return_value = poller(self._nic("nic1"))

        nic = provisioner.create_network_interface("nic1", "subnet1-id", public_ip_name="pip1")

        parameters = nics.begin_create_or_update.call_args.args[2]
        ip_config = parameters["ip_configurations"][0]
        assert ip_config["subnet"] == {"id": "subnet1-id"}
        assert ip_config["public_ip_address"] == {"id": pip_id}
        assert nic.public_ip_name == "pip1"
        assert nic.private_ip == "10.10.2.4"

    def test_nic_without_public_ip(self, provisioner, mock_clients):
        nics = mock_clients.network.network_interfaces
        nics.begin_create_or_update.return_value = poller(self._nic("nic2", "10.10.3.4"))

        nic = provisioner.create_network_interface("nic2", "subnet2-id")

        mock_clients.network.public_ip_addresses.begin_create_or_update.assert_not_called()
        ip_config = nics.begin_create_or_update.call_args.args[2]["ip_configurations"][0]
        assert "public_ip_address" not in ip_config
        assert nic.public_ip_name is None
        assert nic.id == network_id("networkInterfaces", "nic2")

    def test_nic_failure(self, provisioner, mock_clients):
        mock_clients.network.network_interfaces.begin_create_or_update.side_effect = (
            HttpResponseError(message="SubnetNotFound")
        )

        with pytest.raises(NetworkProvisioningError, match="Failed to create network interface"):
            provisioner.create_network_interface("nic2", "subnet2-id")
