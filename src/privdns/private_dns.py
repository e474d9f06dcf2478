"""Private DNS zone operations.

Wraps azure-mgmt-privatedns for the three resources the sample needs:

- the private zone itself (location is always "global")
- a virtual network link with auto-registration, so VMs in the network
  register their own names and can resolve records in the zone
- an A record pointing at a private address

Every create call waits for the long-running operation to finish.
"""

import logging
from dataclasses import dataclass

from azure.core.exceptions import HttpResponseError

from privdns.azure_clients import AzureClients
from privdns.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)

# Private DNS zones and their links are not regional resources
PRIVATE_DNS_LOCATION = "global"


class PrivateDnsError(Exception):
    """Raised when a private DNS operation fails."""

    pass


@dataclass
class ZoneInfo:
    """Created private DNS zone."""

    name: str
    id: str


@dataclass
class ARecordInfo:
    """Created A record set."""

    name: str
    fqdn: str
    ipv4_addresses: list[str]
    ttl: int


class PrivateDnsManager:
    """Create private DNS zones, virtual network links and A records."""

    def __init__(self, clients: AzureClients, resource_group: str):
        self.clients = clients
        self.resource_group = resource_group

    def create_zone(self, zone_name: str, tags: dict[str, str] | None = None) -> ZoneInfo:
        """Create a private DNS zone.

        Args:
            zone_name: Fully qualified zone name, e.g. "privatednszone12345.com"
            tags: Optional resource tags

        Returns:
            ZoneInfo

        Raises:
            PrivateDnsError: If creation fails
        """
        logger.info("Creating private DNS zone...")
        parameters = {"location": PRIVATE_DNS_LOCATION, "tags": dict(tags or {})}
        try:
            zone = self.clients.private_dns.private_zones.begin_create_or_update(
                self.resource_group, zone_name, parameters
            ).result()
        except HttpResponseError as e:
            raise PrivateDnsError(
                LogSanitizer.create_safe_error_message(e, f"Failed to create zone {zone_name}")
            ) from e

        logger.info(f"Created private DNS zone {zone.name}")
        return ZoneInfo(name=zone.name, id=zone.id)

    def link_virtual_network(
        self,
        zone_name: str,
        link_name: str,
        vnet_id: str,
        registration_enabled: bool = True,
    ) -> str:
        """Link a virtual network to the zone.

        Args:
            zone_name: Zone to link
            link_name: Name of the link resource
            vnet_id: Resource ID of the virtual network
            registration_enabled: Auto-register VM hostnames in the zone

        Returns:
            Resource ID of the link

        Raises:
            PrivateDnsError: If the link cannot be created
        """
        logger.info("Creating virtual network link within private zone...")
        parameters = {
            "location": PRIVATE_DNS_LOCATION,
            "registration_enabled": registration_enabled,
            "virtual_network": {"id": vnet_id},
        }
        try:
            link = self.clients.private_dns.virtual_network_links.begin_create_or_update(
                self.resource_group, zone_name, link_name, parameters
            ).result()
        except HttpResponseError as e:
            raise PrivateDnsError(
                LogSanitizer.create_safe_error_message(
                    e, f"Failed to link virtual network to zone {zone_name}"
                )
            ) from e

        return link.id

    def create_a_record(
        self, zone_name: str, record_name: str, ipv4_address: str, ttl: int = 3600
    ) -> ARecordInfo:
        """Create an A record set with a single address.

        Args:
            zone_name: Zone that holds the record
            record_name: Relative record name, e.g. "vm001arecord"
            ipv4_address: Address the name resolves to
            ttl: Time to live in seconds

        Returns:
            ARecordInfo

        Raises:
            PrivateDnsError: If the record cannot be created
        """
        logger.info("Creating additional record set...")
        parameters = {"ttl": ttl, "a_records": [{"ipv4_address": ipv4_address}]}
        try:
            record_set = self.clients.private_dns.record_sets.create_or_update(
                self.resource_group, zone_name, "A", record_name, parameters
            )
        except HttpResponseError as e:
            raise PrivateDnsError(
                LogSanitizer.create_safe_error_message(
                    e, f"Failed to create A record {record_name} in zone {zone_name}"
                )
            ) from e

        logger.info(f"Created additional record set {record_set.name}")
        return ARecordInfo(
            name=record_set.name,
            fqdn=record_set.fqdn or f"{record_name}.{zone_name}.",
            ipv4_addresses=[record.ipv4_address for record in record_set.a_records or []],
            ttl=record_set.ttl,
        )
