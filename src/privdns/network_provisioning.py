"""Virtual network and network interface provisioning.

This module creates the network side of the sample:
- A virtual network with one address space and several subnets
- Subnet ID lookup (NICs bind to subnets by resource ID)
- A static public IP for the first VM
- Network interfaces, optionally carrying a public IP

All create calls wait for Azure to report completion before returning.
"""

import logging
from dataclasses import dataclass

from azure.core.exceptions import HttpResponseError

from privdns.azure_clients import AzureClients
from privdns.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)


class NetworkProvisioningError(Exception):
    """Raised when network resources cannot be created or read."""

    pass


@dataclass
class VirtualNetworkInfo:
    """Created virtual network."""

    name: str
    id: str
    address_prefixes: list[str]
    subnet_names: list[str]


@dataclass
class NetworkInterfaceInfo:
    """Created network interface."""

    name: str
    id: str
    subnet_id: str
    public_ip_name: str | None = None
    private_ip: str | None = None


class NetworkProvisioner:
    """Create virtual networks, public IPs and NICs in one resource group."""

    def __init__(self, clients: AzureClients, resource_group: str, location: str):
        self.clients = clients
        self.resource_group = resource_group
        self.location = location

    def _wrap(self, e: Exception, context: str) -> NetworkProvisioningError:
        return NetworkProvisioningError(LogSanitizer.create_safe_error_message(e, context))

    def create_virtual_network(
        self, vnet_name: str, address_prefix: str, subnets: dict[str, str]
    ) -> VirtualNetworkInfo:
        """Create a virtual network with the given subnets.

        Args:
            vnet_name: Virtual network name
            address_prefix: Address space, e.g. "10.10.0.0/16"
            subnets: Subnet name -> address prefix

        Returns:
            VirtualNetworkInfo

        Raises:
            NetworkProvisioningError: If creation fails
        """
        logger.info("Creating virtual network...")
        parameters = {
            "location": self.location,
            "address_space": {"address_prefixes": [address_prefix]},
            "subnets": [
                {"name": name, "address_prefix": prefix} for name, prefix in subnets.items()
            ],
        }
        try:
            vnet = self.clients.network.virtual_networks.begin_create_or_update(
                self.resource_group, vnet_name, parameters
            ).result()
        except HttpResponseError as e:
            raise self._wrap(e, f"Failed to create virtual network {vnet_name}") from e

        logger.info(f"Created virtual network: {vnet.name}")
        return VirtualNetworkInfo(
            name=vnet.name,
            id=vnet.id,
            address_prefixes=list(vnet.address_space.address_prefixes),
            subnet_names=[subnet.name for subnet in vnet.subnets or []],
        )

    def get_subnet_id(self, vnet_name: str, subnet_name: str) -> str:
        """Return the resource ID of a subnet.

        Raises:
            NetworkProvisioningError: If the subnet cannot be read
        """
        try:
            subnet = self.clients.network.subnets.get(self.resource_group, vnet_name, subnet_name)
        except HttpResponseError as e:
            raise self._wrap(e, f"Failed to read subnet {subnet_name} of {vnet_name}") from e
        return subnet.id

    def create_public_ip(self, public_ip_name: str) -> str:
        """Create a static Standard SKU public IP.

        Returns:
            Resource ID of the public IP

        Raises:
            NetworkProvisioningError: If creation fails
        """
        logger.debug(f"Creating public IP {public_ip_name}")
        parameters = {
            "location": self.location,
            "sku": {"name": "Standard"},
            "public_ip_allocation_method": "Static",
        }
        try:
            public_ip = self.clients.network.public_ip_addresses.begin_create_or_update(
                self.resource_group, public_ip_name, parameters
            ).result()
        except HttpResponseError as e:
            raise self._wrap(e, f"Failed to create public IP {public_ip_name}") from e
        return public_ip.id

    def get_public_ip_address(self, public_ip_name: str) -> str | None:
        """Return the IPv4 address assigned to a public IP resource.

        Raises:
            NetworkProvisioningError: If the public IP cannot be read
        """
        try:
            public_ip = self.clients.network.public_ip_addresses.get(
                self.resource_group, public_ip_name
            )
        except HttpResponseError as e:
            raise self._wrap(e, f"Failed to read public IP {public_ip_name}") from e
        return public_ip.ip_address

    def create_network_interface(
        self, nic_name: str, subnet_id: str, public_ip_name: str | None = None
    ) -> NetworkInterfaceInfo:
        """Create a NIC bound to a subnet.

        When public_ip_name is given a public IP with that name is created
        first and attached to the NIC's IP configuration.

        Args:
            nic_name: Network interface name
            subnet_id: Resource ID of the subnet
            public_ip_name: Optional public IP to create and attach

        Returns:
            NetworkInterfaceInfo

        Raises:
            NetworkProvisioningError: If creation fails
        """
        ip_configuration = {
            "name": f"{nic_name}-ipconfig",
            "subnet": {"id": subnet_id},
            "private_ip_allocation_method": "Dynamic",
        }
        if public_ip_name:
            ip_configuration["public_ip_address"] = {"id": self.create_public_ip(public_ip_name)}

        logger.info(f"Creating network interface {nic_name}...")
        parameters = {"location": self.location, "ip_configurations": [ip_configuration]}
        try:
            nic = self.clients.network.network_interfaces.begin_create_or_update(
                self.resource_group, nic_name, parameters
            ).result()
        except HttpResponseError as e:
            raise self._wrap(e, f"Failed to create network interface {nic_name}") from e

        private_ip = None
        if nic.ip_configurations:
            private_ip = nic.ip_configurations[0].private_ip_address

        logger.info(f"Created network interface {nic.name}")
        return NetworkInterfaceInfo(
            name=nic.name,
            id=nic.id,
            subnet_id=subnet_id,
            public_ip_name=public_ip_name,
            private_ip=private_ip,
        )
