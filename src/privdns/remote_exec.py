"""Remote command execution module.

This module runs PowerShell inside Azure VMs through the VM run-command
API. No network path to the VM is needed: the VM agent fetches the script
and reports its output back to Azure Resource Manager.

Security:
- Host names validated before they are placed in a script
- No secrets in scripts
"""

import logging
import time
from dataclasses import dataclass

from azure.core.exceptions import HttpResponseError

from privdns.azure_clients import AzureClients
from privdns.log_sanitizer import LogSanitizer
from privdns.naming import is_valid_dns_name

logger = logging.getLogger(__name__)

RUN_POWERSHELL_SCRIPT = "RunPowerShellScript"

ALLOW_ICMP_SCRIPT = 'New-NetFirewallRule -DisplayName "Allow ICMPv4-In" -Protocol ICMPv4'


class RemoteExecError(Exception):
    """Raised when remote command execution fails."""

    pass


@dataclass
class RemoteResult:
    """Result from remote command execution."""

    vm_name: str
    success: bool
    code: str
    message: str
    duration: float = 0.0

    def get_output(self) -> str:
        """Get command output."""
        return self.message


class RunCommandExecutor:
    """Execute scripts on VMs via the run-command API.

    This class provides:
    - Generic PowerShell execution
    - The firewall rule that lets the VMs answer ping
    - A ping to a DNS name from inside the VM
    """

    def __init__(self, clients: AzureClients, resource_group: str):
        self.clients = clients
        self.resource_group = resource_group

    def run_powershell(self, vm_name: str, script: list[str]) -> RemoteResult:
        """Run PowerShell lines on a VM and wait for the result.

        Args:
            vm_name: Target VM
            script: Script lines

        Returns:
            RemoteResult built from the first status of the command output

        Raises:
            RemoteExecError: If the script is empty or the call fails
        """
        if not script:
            raise RemoteExecError("Script cannot be empty")

        start_time = time.time()
        parameters = {"command_id": RUN_POWERSHELL_SCRIPT, "script": list(script)}
        try:
            result = self.clients.compute.virtual_machines.begin_run_command(
                self.resource_group, vm_name, parameters
            ).result()
        except HttpResponseError as e:
            raise RemoteExecError(
                LogSanitizer.create_safe_error_message(e, f"Run command failed on {vm_name}")
            ) from e
        duration = time.time() - start_time

        statuses = result.value or []
        if not statuses:
            return RemoteResult(
                vm_name=vm_name, success=True, code="", message="", duration=duration
            )

        # First status is stdout, second (if present) is stderr
        first = statuses[0]
        success = "succeeded" in (first.code or "").lower()
        return RemoteResult(
            vm_name=vm_name,
            success=success,
            code=first.code or "",
            message=first.message or "",
            duration=duration,
        )

    def allow_inbound_icmp(self, vm_name: str) -> RemoteResult:
        """Open the Windows firewall for inbound ICMPv4 echo."""
        return self.run_powershell(vm_name, [ALLOW_ICMP_SCRIPT])

    def ping(self, vm_name: str, host: str) -> RemoteResult:
        """Ping host from inside vm_name.

        Raises:
            RemoteExecError: If host is not a valid DNS name
        """
        if not is_valid_dns_name(host):
            raise RemoteExecError(f"Invalid host name: {host}")
        return self.run_powershell(vm_name, [f"ping {host}"])
