"""VM provisioning module.

This module handles Azure VM creation for the DNS test machines. The VMs
run Windows Server because the test runs PowerShell through the VM
run-command API.

Security:
- Generated admin password, never logged
- Sanitized error messages
- Input validation (VM names)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar

from azure.core.exceptions import HttpResponseError

from privdns.azure_clients import AzureClients
from privdns.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)


class ProvisioningError(Exception):
    """Raised when VM provisioning fails."""

    pass


@dataclass
class VMConfig:
    """VM configuration parameters."""

    name: str
    resource_group: str
    location: str
    nic_id: str
    admin_password: str = field(repr=False)
    size: str = "Standard_D2s_v3"
    admin_username: str = "azureadmin"
    image: dict[str, str] | None = None


@dataclass
class VMDetails:
    """VM provisioning result details."""

    name: str
    resource_group: str
    location: str
    size: str
    id: str | None = None
    state: str = "Unknown"


class VMProvisioner:
    """Provision Windows VMs on pre-created network interfaces."""

    DEFAULT_IMAGE: ClassVar[dict[str, str]] = {
        "publisher": "MicrosoftWindowsServer",
        "offer": "WindowsServer",
        "sku": "2022-datacenter-azure-edition",
        "version": "latest",
    }

    # Windows computer names are limited to 15 characters
    VM_NAME_PATTERN: ClassVar[re.Pattern] = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9-]{0,13}[a-zA-Z0-9]$")

    def __init__(self, clients: AzureClients):
        self.clients = clients

    @classmethod
    def validate_vm_name(cls, name: str) -> None:
        """Validate a Windows VM name.

        Raises:
            ProvisioningError: If the name is invalid
        """
        if not cls.VM_NAME_PATTERN.match(name):
            raise ProvisioningError(
                f"Invalid VM name: {name}. Must be 2-15 characters, "
                "letters, numbers and hyphens, not starting or ending with a hyphen."
            )

    def build_vm_parameters(self, config: VMConfig) -> dict[str, Any]:
        """Build the create request body for a VM."""
        return {
            "location": config.location,
            "hardware_profile": {"vm_size": config.size},
            "storage_profile": {
                "image_reference": dict(config.image or self.DEFAULT_IMAGE),
                "os_disk": {
                    "name": f"{config.name}-osdisk",
                    "create_option": "FromImage",
                    "caching": "ReadWrite",
                    "managed_disk": {"storage_account_type": "Standard_LRS"},
                },
            },
            "os_profile": {
                "computer_name": config.name,
                "admin_username": config.admin_username,
                "admin_password": config.admin_password,
            },
            "network_profile": {
                "network_interfaces": [{"id": config.nic_id, "primary": True}],
            },
        }

    def create_vm(self, config: VMConfig) -> VMDetails:
        """Create a VM and wait until provisioning completes.

        Args:
            config: VM configuration

        Returns:
            VMDetails

        Raises:
            ProvisioningError: If validation or creation fails
        """
        self.validate_vm_name(config.name)

        parameters = self.build_vm_parameters(config)
        logger.debug(f"VM request: {LogSanitizer.sanitize_dict(parameters)}")

        try:
            vm = self.clients.compute.virtual_machines.begin_create_or_update(
                config.resource_group, config.name, parameters
            ).result()
        except HttpResponseError as e:
            safe_error = LogSanitizer.redact_value(
                LogSanitizer.create_safe_error_message(e, f"Failed to create VM {config.name}"),
                config.admin_password,
            )
            raise ProvisioningError(safe_error) from e

        return VMDetails(
            name=vm.name,
            resource_group=config.resource_group,
            location=vm.location,
            size=config.size,
            id=vm.id,
            state=vm.provisioning_state or "Unknown",
        )
