"""Azure management client bundle.

One authenticated credential feeds four Azure Resource Manager clients.
The provisioning helpers receive the bundle instead of building clients
themselves, which keeps the credential in one place and lets tests pass
mocks.
"""

from dataclasses import dataclass

from azure.core.credentials import TokenCredential
from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.network import NetworkManagementClient
from azure.mgmt.privatedns import PrivateDnsManagementClient
from azure.mgmt.resource import ResourceManagementClient


@dataclass
class AzureClients:
    """Management clients for one subscription."""

    subscription_id: str
    resource: ResourceManagementClient
    network: NetworkManagementClient
    compute: ComputeManagementClient
    private_dns: PrivateDnsManagementClient

    @classmethod
    def create(cls, credential: TokenCredential, subscription_id: str) -> "AzureClients":
        """Build every client with the same credential and subscription."""
        return cls(
            subscription_id=subscription_id,
            resource=ResourceManagementClient(credential, subscription_id),
            network=NetworkManagementClient(credential, subscription_id),
            compute=ComputeManagementClient(credential, subscription_id),
            private_dns=PrivateDnsManagementClient(credential, subscription_id),
        )

    def close(self) -> None:
        """Close the underlying HTTP pipelines."""
        for client in (self.resource, self.network, self.compute, self.private_dns):
            client.close()
