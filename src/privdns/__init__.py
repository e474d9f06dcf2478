"""privdns - Azure private DNS provisioning sample

Philosophy:
- Ruthless simplicity
- One step after another, each waiting for Azure to finish
- Security by design (no credentials in code or logs)
- Fail fast with helpful guidance

privdns provisions a resource group, a private DNS zone, a linked virtual
network and two Windows VMs, then checks from inside the network that a
record in the zone resolves.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
