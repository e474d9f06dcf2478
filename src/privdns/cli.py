"""CLI entry point for privdns.

Commands:
    privdns                      # Run the private DNS sample
    privdns --cleanup            # Run it, then delete the resource group
    privdns --location westus2   # Provision in another region

Credentials come from CLIENT_ID, CLIENT_SECRET, TENANT_ID and
SUBSCRIPTION_ID.
"""

import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from privdns import __version__
from privdns.auth_models import ServicePrincipalConfig
from privdns.azure_clients import AzureClients
from privdns.config_manager import ConfigManager
from privdns.credential_factory import CredentialFactory
from privdns.log_sanitizer import LogSanitizer
from privdns.sample import PrivateDnsSample, SampleResult

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Send log lines to stdout; keep Azure SDK HTTP logging quiet unless verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stdout,
    )
    if not verbose:
        logging.getLogger("azure").setLevel(logging.WARNING)


def render_summary(result: SampleResult, console: Console | None = None) -> None:
    """Print a table of the created resources."""
    console = console or Console()

    table = Table(title="Private DNS Sample Resources", show_header=True)
    table.add_column("Resource", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Details", style="yellow")

    table.add_row("Resource group", result.resource_group, result.resource_group_id)
    table.add_row("Private DNS zone", result.zone_name, "global")
    table.add_row("Virtual network", result.vnet_name, result.vnet_id)
    table.add_row("Network link", result.link_name, "registration enabled")
    for nic_name in result.nic_names:
        table.add_row("Network interface", nic_name, "")
    for vm in result.vms:
        table.add_row("Virtual machine", vm.name, f"{vm.size} ({vm.state})")
    table.add_row("A record", result.a_record_fqdn, "")
    table.add_row("vm001 public IP", result.vm1_public_ip or "-", "")

    console.print(table)


@click.command()
@click.option("--config", help="Config file path", type=click.Path())
@click.option("--location", help="Azure region (overrides config)", type=str)
@click.option(
    "--cleanup/--keep",
    default=False,
    help="Delete the resource group when the run ends (default: keep)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
def main(config: str | None, location: str | None, cleanup: bool, verbose: bool) -> None:
    """Provision an Azure private DNS zone and test it from two VMs.

    \b
    Creates, in order:
        resource group, private DNS zone, virtual network (3 subnets),
        virtual network link, 2 NICs, 2 Windows VMs, an A record,
    then pings the A record from inside the network.

    \b
    Environment:
        CLIENT_ID, CLIENT_SECRET, TENANT_ID, SUBSCRIPTION_ID

    \b
    Examples:
        privdns
        privdns --location westus2
        privdns --cleanup
    """
    configure_logging(verbose)

    sample: PrivateDnsSample | None = None
    clients: AzureClients | None = None
    failed = False
    try:
        sample_config = ConfigManager.load_config(config, location=location)
        sp_config = ServicePrincipalConfig.from_environment()
        logger.debug(f"Service principal: {sp_config.to_dict_masked()}")
        credential = CredentialFactory.create_credential(sp_config)
        clients = AzureClients.create(credential, sp_config.subscription_id)

        sample = PrivateDnsSample(clients, sample_config)
        result = sample.run()
        render_summary(result)

    except Exception as e:
        failed = True
        logger.error(LogSanitizer.create_safe_error_message(e, "Error"))
        logger.debug("Traceback:", exc_info=True)

    finally:
        if cleanup and sample is not None:
            try:
                sample.cleanup()
            except Exception as e:
                failed = True
                logger.error(LogSanitizer.create_safe_error_message(e, "Cleanup failed"))
        elif cleanup:
            logger.info("Did not create any resources in Azure. No clean up is necessary")
        if clients is not None:
            clients.close()

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
