"""Private DNS sample orchestration.

PrivateDnsSample runs the fixed provisioning sequence:

 1. Resource group
 2. Private DNS zone
 3. Virtual network with three subnets
 4. Virtual network link (auto-registration on)
 5. Two network interfaces (the first with a public IP)
 6. Two Windows VMs
 7. Public IP of the first VM
 8. A record in the zone
 9. Firewall rule for inbound ICMP on both VMs
10. Ping of the A record from the second VM

Each step waits for Azure to finish before the next one starts, and each
step uses identifiers returned by earlier steps. Nothing is retried: an
exception stops the run and propagates to the caller.
"""

import contextlib
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from privdns.azure_clients import AzureClients
from privdns.config_manager import SampleConfig
from privdns.modules.progress import ProgressDisplay
from privdns.naming import create_random_name, generate_admin_password
from privdns.network_provisioning import NetworkProvisioner
from privdns.private_dns import PrivateDnsManager
from privdns.remote_exec import RunCommandExecutor
from privdns.resource_group import ResourceGroupManager
from privdns.vm_provisioning import VMConfig, VMDetails, VMProvisioner

logger = logging.getLogger(__name__)

TOTAL_STEPS = 10

VM1_NAME = "vm001"
VM2_NAME = "vm002"


@dataclass
class SampleResult:
    """Everything the sample created, in creation order."""

    resource_group: str
    resource_group_id: str
    zone_name: str
    vnet_name: str
    vnet_id: str
    link_name: str
    nic_names: list[str] = field(default_factory=list)
    vms: list[VMDetails] = field(default_factory=list)
    vm1_public_ip: str | None = None
    a_record_fqdn: str = ""
    ping_output: str = ""


class PrivateDnsSample:
    """Run the private DNS provisioning sequence against one subscription."""

    def __init__(
        self,
        clients: AzureClients,
        config: SampleConfig,
        progress: ProgressDisplay | None = None,
        name_factory: Callable[[str], str] = create_random_name,
        password_factory: Callable[[], str] = generate_admin_password,
    ):
        self.clients = clients
        self.config = config
        self.progress = progress or ProgressDisplay(total_steps=TOTAL_STEPS)
        self.name_factory = name_factory
        self.password_factory = password_factory

        # Set as soon as the group exists so teardown can find it after a failure
        self.resource_group_name: str | None = None
        self.resource_group_id: str | None = None

    @contextlib.contextmanager
    def _step(self, name: str) -> Iterator[None]:
        self.progress.start_step(name)
        try:
            yield
        except Exception:
            self.progress.complete(success=False)
            raise
        self.progress.complete(success=True)

    def run(self) -> SampleResult:
        """Provision every resource and test name resolution.

        Returns:
            SampleResult

        Raises:
            Any error from the helpers; nothing is caught here
        """
        config = self.config

        with self._step("Creating resource group"):
            group = ResourceGroupManager(self.clients).create_resource_group(
                self.name_factory("PrivateDnsTemplateRG"), config.location
            )
            self.resource_group_name = group.name
            self.resource_group_id = group.id

        rg_name = group.name
        dns = PrivateDnsManager(self.clients, rg_name)
        network = NetworkProvisioner(self.clients, rg_name, group.location)

        with self._step("Creating private DNS zone"):
            zone = dns.create_zone(f"{self.name_factory('privateDnsZone')}.com", config.zone_tags)

        with self._step("Creating virtual network"):
            vnet = network.create_virtual_network(
                self.name_factory("vnet"), config.vnet_address_prefix, config.subnets
            )

        with self._step("Linking virtual network to private zone"):
            link_name = self.name_factory("link")
            dns.link_virtual_network(zone.name, link_name, vnet.id, registration_enabled=True)
            logger.info(f"Linked a virtual network {vnet.name}")

        with self._step("Creating network interfaces"):
            public_ip_name = self.name_factory("pip")
            subnet_id1 = network.get_subnet_id(vnet.name, "subnet1")
            subnet_id2 = network.get_subnet_id(vnet.name, "subnet2")
            nic1 = network.create_network_interface(
                self.name_factory("nic"), subnet_id1, public_ip_name=public_ip_name
            )
            nic2 = network.create_network_interface(self.name_factory("nic"), subnet_id2)

        with self._step("Creating virtual machines"):
            vms = VMProvisioner(self.clients)
            logger.info("Creating first virtual machine...")
            vm1 = vms.create_vm(self._vm_config(VM1_NAME, rg_name, group.location, nic1.id))
            logger.info(f"Created first virtual machine {vm1.name}")

            logger.info("Creating second virtual machine...")
            vm2 = vms.create_vm(self._vm_config(VM2_NAME, rg_name, group.location, nic2.id))
            logger.info(f"Created second virtual machine {vm2.name}")

        with self._step("Reading first VM public IP"):
            logger.info("Get vm1 public IP..")
            vm1_public_ip = network.get_public_ip_address(public_ip_name)
            logger.info(f"vm1 public IP: {vm1_public_ip}")

        with self._step("Creating A record"):
            record = dns.create_a_record(
                zone.name, config.a_record_name, config.a_record_ip, config.a_record_ttl
            )

        executor = RunCommandExecutor(self.clients, rg_name)

        with self._step("Allowing inbound ICMP on VMs"):
            logger.info("Configure VMs to allow inbound ICMP")
            for vm in (vm1, vm2):
                rule = executor.allow_inbound_icmp(vm.name)
                if not rule.success:
                    logger.warning(f"Firewall rule on {vm.name} reported {rule.code}")

        with self._step("Testing private DNS resolution"):
            target = f"{config.a_record_name}.{zone.name}"
            # The record points at vm001, so resolve it from the other VM
            logger.info(f"VM2 run command: ping {target}")
            ping = executor.ping(vm2.name, target)
            if not ping.success:
                logger.warning(f"Ping on {vm2.name} reported {ping.code}")
            logger.info(ping.get_output())

        return SampleResult(
            resource_group=rg_name,
            resource_group_id=group.id,
            zone_name=zone.name,
            vnet_name=vnet.name,
            vnet_id=vnet.id,
            link_name=link_name,
            nic_names=[nic1.name, nic2.name],
            vms=[vm1, vm2],
            vm1_public_ip=vm1_public_ip,
            a_record_fqdn=record.fqdn,
            ping_output=ping.get_output(),
        )

    def _vm_config(self, name: str, resource_group: str, location: str, nic_id: str) -> VMConfig:
        return VMConfig(
            name=name,
            resource_group=resource_group,
            location=location,
            nic_id=nic_id,
            admin_password=self.password_factory(),
            size=self.config.vm_size,
            admin_username=self.config.admin_username,
        )

    def cleanup(self) -> bool:
        """Delete the resource group if this run created one.

        Returns:
            True if a resource group was deleted, False if there was nothing to delete

        Raises:
            ResourceGroupError: If deletion fails
        """
        if not self.resource_group_name:
            logger.info("Did not create any resources in Azure. No clean up is necessary")
            return False

        ResourceGroupManager(self.clients).delete_resource_group(self.resource_group_name)
        self.resource_group_name = None
        self.resource_group_id = None
        return True
