"""Resource group creation and teardown.

The resource group is the parent of everything the sample creates, so
deleting it is the whole teardown.
"""

import logging
from dataclasses import dataclass

from azure.core.exceptions import HttpResponseError

from privdns.azure_clients import AzureClients
from privdns.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)


class ResourceGroupError(Exception):
    """Raised when resource group operations fail."""

    pass


@dataclass
class ResourceGroupInfo:
    """Created resource group."""

    name: str
    location: str
    id: str


class ResourceGroupManager:
    """Create and delete the sample resource group."""

    def __init__(self, clients: AzureClients):
        self.clients = clients

    def create_resource_group(self, name: str, location: str) -> ResourceGroupInfo:
        """Create (or update) a resource group.

        Args:
            name: Resource group name
            location: Azure region

        Returns:
            ResourceGroupInfo

        Raises:
            ResourceGroupError: If Azure rejects the request
        """
        logger.info("creating resource group...")
        try:
            group = self.clients.resource.resource_groups.create_or_update(
                name, {"location": location}
            )
        except HttpResponseError as e:
            raise ResourceGroupError(
                LogSanitizer.create_safe_error_message(e, f"Failed to create resource group {name}")
            ) from e

        logger.info(f"Created a resource group with name: {group.name}")
        return ResourceGroupInfo(name=group.name, location=group.location, id=group.id)

    def delete_resource_group(self, name: str) -> None:
        """Delete a resource group and everything in it, waiting for completion.

        Raises:
            ResourceGroupError: If deletion fails
        """
        logger.info(f"Deleting Resource Group: {name}")
        try:
            self.clients.resource.resource_groups.begin_delete(name).result()
        except HttpResponseError as e:
            raise ResourceGroupError(
                LogSanitizer.create_safe_error_message(e, f"Failed to delete resource group {name}")
            ) from e
        logger.info(f"Deleted Resource Group: {name}")
